"""Structured logging for the Salesforce reports tooling."""

from .logger import StructuredLogger
from .multi_file_logger import MultiFileLogger, get_multi_file_logger
from .framework import (
    SmartLogger,
    log_execution,  # Decorator for function logging
    log_operation,  # Context manager for scoped operations
)

__all__ = [
    "StructuredLogger",
    "MultiFileLogger",
    "get_multi_file_logger",
    "SmartLogger",
    "log_execution",
    "log_operation",
]
