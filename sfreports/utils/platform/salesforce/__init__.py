"""Salesforce platform utilities."""

from .soql_builder import SOQLQueryBuilder

__all__ = [
    'SOQLQueryBuilder',
]
