"""
Logging configuration for require-detective entry points.

The library modules only create module-level loggers; the command line and
the tool server call ``configure_logging`` to route them to stderr, keeping
stdout free for results (and for JSON-RPC when running as a tool server).
"""

import json
import logging
import sys
from typing import Any, TextIO

from .constants import LOGGER_NAME

# Extra attributes copied into the structured log entry when present
_EXTRA_FIELDS = ("event", "path", "word", "strings", "expressions", "error")


class DetectiveLogFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log records with structured data."""
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def configure_logging(
    log_level: str = "WARNING",
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        stream: Destination stream, stderr when omitted

    Returns:
        The configured package logger

    Raises:
        ValueError: If log_level is not a known level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False  # Don't propagate to root logger

    # Clear existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(DetectiveLogFormatter())
    logger.addHandler(handler)
    return logger
