"""
Structured logging utilities for booking and cancellation events
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "medibook"


class StructuredLogger:
    """
    Structured logger that emits one JSON object per event.

    Fields bound at construction (``component="allocator"``) are merged into
    every event, so callers only pass what varies per call.
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Return a logger with extra fields bound to every event."""
        return StructuredLogger(self.logger.name, {**self.context, **fields})

    def log(self, level: str, event: str, **kwargs: Any) -> None:
        """Log with structured data"""
        log_data = {"event": event, **self.context, **kwargs}
        self.logger.log(_LEVELS[level], json.dumps(log_data, default=str))

    def info(self, event: str, **kwargs: Any) -> None:
        self.log("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self.log("warning", event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self.log("error", event, **kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        self.log("debug", event, **kwargs)


_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Attach a stdout handler to the ``medibook`` logger tree.

    Safe to call more than once; the handler is installed only on first call.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root.addHandler(handler)


def get_logger(name: str, **context: Any) -> StructuredLogger:
    """Get or create a structured logger"""
    return StructuredLogger(name, context)
