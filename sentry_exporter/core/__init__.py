"""
Core Infrastructure - Logging and Scrape Bookkeeping

Usage:
    from sentry_exporter.core import get_logger, setup_logging

    setup_logging(level="info")
    logger = get_logger(__name__)
"""

from .logging_config import ContextFormatter, JSONFormatter, get_logger, setup_logging
from .scrape_metrics import ScrapeBookkeeper, ScrapeTracker, track_scrape

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "JSONFormatter",
    "ContextFormatter",
    # Scrape bookkeeping
    "ScrapeBookkeeper",
    "ScrapeTracker",
    "track_scrape",
]
