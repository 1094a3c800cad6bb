"""Component-based log file routing.

Each component gets its own log file, with an additional error log that
captures all ERROR level messages across components.

Log Files:
- reports.log: Report tool dispatch and formatting
- salesforce.log: Salesforce session and Analytics REST calls
- system.log: Configuration and anything without a known component
- errors.log: All ERROR level messages (cross-component)

The directory comes from ``LOG_DIR`` (default ``logs``) and the level from
``LOG_LEVEL`` (default ``INFO``). Both are read from the environment directly
because configuration itself logs through this module.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Dict, Optional
from threading import Lock

from .logger import StructuredLogger


class MultiFileLogger(StructuredLogger):
    """Logger that routes messages to different files based on component."""

    COMPONENT_FILES = {
        'reports': 'reports.log',
        'salesforce': 'salesforce.log',
        'system': 'system.log',
        'config': 'system.log',
    }

    def __init__(self, log_dir: str = "logs", level: int = logging.INFO):
        """Initialize multi-file logger.

        Args:
            log_dir: Directory for log files
            level: Logging level (default: INFO)
        """
        super().__init__(level)

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.handlers: Dict[str, logging.Handler] = {}
        self.lock = Lock()

        self._setup_handlers()
        self._setup_error_handler()

    def _setup_handlers(self):
        """Create one handler per log file, shared by aliased components."""
        by_filename: Dict[str, logging.Handler] = {}
        for component, filename in self.COMPONENT_FILES.items():
            if filename not in by_filename:
                handler = logging.handlers.RotatingFileHandler(
                    self.log_dir / filename,
                    maxBytes=50*1024*1024,  # 50MB per file
                    backupCount=5,
                    encoding='utf-8'
                )
                handler.setFormatter(logging.Formatter('%(message)s'))
                handler.setLevel(self.level)
                by_filename[filename] = handler
            self.handlers[component] = by_filename[filename]

    def _setup_error_handler(self):
        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / 'errors.log',
            maxBytes=50*1024*1024,
            backupCount=10,
            encoding='utf-8'
        )
        error_handler.setFormatter(logging.Formatter('%(message)s'))
        error_handler.setLevel(logging.ERROR)
        self.handlers['_errors'] = error_handler

    def _get_handler(self, component: Optional[str]) -> logging.Handler:
        if component and component in self.handlers:
            return self.handlers[component]
        return self.handlers['system']

    def _emit(self, record: logging.LogRecord, component: Optional[str]):
        """Route a record to the component file (and errors.log)."""
        with self.lock:
            handler = self._get_handler(component)
            if record.levelno >= handler.level:
                handler.emit(record)

            if record.levelno >= logging.ERROR:
                self.handlers['_errors'].emit(record)


_multi_logger = None
_multi_logger_lock = Lock()


def get_multi_file_logger() -> MultiFileLogger:
    """Get the global multi-file logger instance (singleton)."""
    global _multi_logger
    if _multi_logger is None:
        with _multi_logger_lock:
            if _multi_logger is None:
                level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
                _multi_logger = MultiFileLogger(
                    log_dir=os.getenv('LOG_DIR', 'logs'),
                    level=getattr(logging, level_name, logging.INFO)
                )
    return _multi_logger
