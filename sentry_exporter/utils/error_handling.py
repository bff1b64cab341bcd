"""
Error Handling Utility Module

Structured logging helpers for the exporter's partial-failure policy: a
failed fetch is logged with context and the scrape carries on without it.

1. log_and_continue() - Log error and continue execution
2. log_and_return_default() - Log error and return a default value

Every fetch is attempted once per scrape; there is no retry helper.
"""

import logging
from typing import Any


def _error_extra(error: Exception, error_type: str, context: dict[str, Any]) -> dict[str, Any]:
    return {
        "error_type": error_type,
        "exception_class": error.__class__.__name__,
        "context": context,
    }


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
    level: int = logging.WARNING,
) -> None:
    """
    Log an error with structured context and continue execution gracefully.

    Args:
        logger: Logger instance from get_logger(__name__)
        error: The caught exception
        context: Structured data about what failed (organization, project, stat)
        error_type: Human-readable description of the operation
        level: Log level (default: WARNING)

    Example:
        try:
            series = client.get_project_stats(...)
        except SentryAPIError as e:
            log_and_continue(logger, e, {"project": "api", "stat": "received"}, "Stat fetch")
            continue
    """
    logger.log(level, f"{error_type} failed: {error}", extra=_error_extra(error, error_type, context))


def log_and_return_default(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    default_value: Any = None,
    error_type: str = "Operation",
    level: int = logging.WARNING,
) -> Any:
    """
    Log an error and return a default value.

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        default_value: Value to return on error (None, [], {}, etc.)
        error_type: Human-readable description
        level: Log level (default: WARNING)

    Returns:
        default_value

    Example:
        try:
            return client.get_organization(slug)
        except SentryAPIError as e:
            return log_and_return_default(logger, e, {"organization": slug}, None, "Organization detail")
    """
    extra = _error_extra(error, error_type, context)
    extra["default_value"] = str(default_value)
    logger.log(level, f"{error_type} failed, returning default value: {error}", extra=extra)
    return default_value
