"""Fluent SOQL query builder.

Conditions are caller-supplied clauses kept verbatim, which is how report
searches forward a user WHERE clause.
"""

from typing import List, Optional


class SOQLQueryBuilder:
    """SOQL query builder with fluent interface."""

    def __init__(self):
        self._select_fields: List[str] = []
        self._from_object: Optional[str] = None
        self._conditions: List[str] = []
        self._limit: Optional[int] = None

    def select(self, *fields: str) -> 'SOQLQueryBuilder':
        self._select_fields.extend(fields)
        return self

    def from_object(self, object_name: str) -> 'SOQLQueryBuilder':
        self._from_object = object_name
        return self

    def where_raw(self, raw_condition: str) -> 'SOQLQueryBuilder':
        """Add raw WHERE condition string (ANDed with the others)."""
        self._conditions.append(raw_condition)
        return self

    def limit(self, count: int) -> 'SOQLQueryBuilder':
        self._limit = count
        return self

    def validate(self) -> bool:
        if not self._from_object:
            raise ValueError("FROM object is required")
        return True

    def build(self) -> str:
        """Build the complete SOQL query string."""
        self.validate()

        fields = ', '.join(self._select_fields) if self._select_fields else 'Id'
        query_parts = [f"SELECT {fields}", f"FROM {self._from_object}"]

        if len(self._conditions) == 1:
            query_parts.append(f"WHERE {self._conditions[0]}")
        elif self._conditions:
            # Raw clauses may contain OR, so each condition is parenthesized
            joined = ' AND '.join(f"({condition})" for condition in self._conditions)
            query_parts.append(f"WHERE {joined}")

        if self._limit is not None:
            query_parts.append(f"LIMIT {self._limit}")

        return " ".join(query_parts)

    def __str__(self) -> str:
        return self.build()
