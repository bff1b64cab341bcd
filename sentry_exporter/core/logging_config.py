"""
Centralized logging configuration for the exporter.

Provides:
- Human-readable console logging (default)
- JSON structured logging for log aggregation
- Structured ``extra`` fields carried into JSON output

Usage:
    from sentry_exporter.core.logging_config import get_logger, setup_logging

    setup_logging(level="debug")
    logger = get_logger(__name__)
    logger.warning("Stat fetch failed", extra={"project": "api", "stat": "received"})
"""

import json
import logging
import sys
from datetime import UTC, datetime

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

# Attributes present on every LogRecord; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    Format log records as one JSON object per line.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string"""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.threadName,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    Color codes the level name when writing to a terminal.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with color coding"""
        if sys.stderr.isatty():
            levelname = record.levelname
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS.get(levelname, '')}{levelname}{self.RESET}"

        return super().format(record)


def setup_logging(level: str = "info", json_output: bool = False) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Log level name (debug, info, warning, error, critical), case-insensitive
        json_output: If True, use JSON formatter; if False, use human-readable format

    Raises:
        ValueError: If level is not a known log level name

    Example:
        setup_logging(level="debug")
        setup_logging(level="info", json_output=True)
    """
    if level.lower() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level} (expected one of {', '.join(LOG_LEVELS)})")

    log_level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            ContextFormatter(
                fmt="%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.addHandler(handler)

    # Per-request noise from the HTTP stack
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the specified module.

    Args:
        name: Module name (use __name__ in calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
