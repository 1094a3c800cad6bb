"""Structured JSON logger for the Salesforce reports tooling.

Every entry is a single JSON object per line carrying a timestamp, level,
message (an event name such as ``report_operation_start``) and arbitrary
keyword context. Correlation IDs are supplied by the caller as context
(see ``framework.log_operation``). Subclasses decide where records go.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional


class StructuredLogger:
    """Builds JSON log records and hands them to ``_emit``."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

        # Records are emitted explicitly, never through logger propagation
        self.logger = logging.getLogger("sfreports")
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = False

    def _build_entry(self, level: int, message: str, **kwargs) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "message": message,
            **kwargs
        }
        return json.dumps(entry, default=str)

    def _log(self, level: int, message: str, **kwargs):
        if level < self.level:
            return

        record = logging.LogRecord(
            name=self.logger.name,
            level=level,
            pathname="",
            lineno=0,
            msg=self._build_entry(level, message, **kwargs),
            args=(),
            exc_info=None
        )
        self._emit(record, kwargs.get('component'))

    def _emit(self, record: logging.LogRecord, component: Optional[str]):
        raise NotImplementedError

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        return level >= self.level
