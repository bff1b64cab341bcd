"""
Scrape Bookkeeping Module

Provides the process-wide state the exporter reports about itself:
    - ScrapeBookkeeper: process-wide total scrape count
    - ScrapeTracker: timing and counts for a single scrape
    - track_scrape(): context manager wrapping one scrape

The bookkeeper outlives individual scrapes; trackers live for one scrape.
"""

import threading
import time
from collections.abc import Generator
from contextlib import contextmanager

from sentry_exporter.core.logging_config import get_logger
from sentry_exporter.domain.metrics import ScrapeOutcome

logger = get_logger(__name__)


class ScrapeBookkeeper:
    """
    Process-wide scrape totals.

    Updated once per scrape, never per worker. The lock only makes the
    increment atomic; overlapping scrapes are not serialized.

    Example:
        >>> bookkeeper = ScrapeBookkeeper()
        >>> bookkeeper.record(up=True, duration_seconds=1.5).scrape_count
        1
        >>> bookkeeper.record(up=False, duration_seconds=0.2).scrape_count
        2
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.scrape_count: int = 0

    def record(self, up: bool, duration_seconds: float) -> ScrapeOutcome:
        """
        Record a finished scrape.

        Args:
            up: Whether organization pagination completed
            duration_seconds: Wall-clock duration of the scrape

        Returns:
            ScrapeOutcome carrying the new scrape total
        """
        with self._lock:
            self.scrape_count += 1
            return ScrapeOutcome(up=up, duration_seconds=duration_seconds, scrape_count=self.scrape_count)


class ScrapeTracker:
    """
    Tracks one scrape.

    Attributes:
        start_time: Monotonic timestamp when the scrape started (None before start())
        up: Liveness reported for this scrape (False until the walker completes)
        organization_count: Organizations resolved with team/project detail
        job_count: Fetch jobs submitted to the worker pool
        outcome: ScrapeOutcome, set once the scrape is recorded
    """

    def __init__(self) -> None:
        self.start_time: float | None = None
        self.up: bool = False
        self.organization_count: int = 0
        self.job_count: int = 0
        self.outcome: ScrapeOutcome | None = None

    def start(self) -> None:
        self.start_time = time.monotonic()

    def elapsed_seconds(self) -> float:
        """
        Seconds since start(); 0.0 if never started.

        Uses the monotonic clock, so the result is never negative.
        """
        if self.start_time is None:
            return 0.0
        return max(time.monotonic() - self.start_time, 0.0)


@contextmanager
def track_scrape(bookkeeper: ScrapeBookkeeper) -> Generator[ScrapeTracker, None, None]:
    """
    Context manager timing one scrape and recording it with the bookkeeper.

    The scrape is recorded whether the body completes or raises; an
    exception marks the scrape as down and is re-raised.

    Args:
        bookkeeper: Process-wide bookkeeper to record into

    Yields:
        ScrapeTracker for the body to fill in (up, counts)

    Example:
        with track_scrape(bookkeeper) as tracker:
            tracker.up = walker.walk(pool.submit)
        print(tracker.outcome.scrape_count)
    """
    tracker = ScrapeTracker()
    tracker.start()
    logger.debug("Scrape started")

    try:
        yield tracker
    except Exception:
        tracker.up = False
        raise
    finally:
        tracker.outcome = bookkeeper.record(up=tracker.up, duration_seconds=tracker.elapsed_seconds())
        logger.info(
            "Scrape finished",
            extra={
                "up": tracker.up,
                "duration_seconds": round(tracker.outcome.duration_seconds, 3),
                "organizations": tracker.organization_count,
                "jobs": tracker.job_count,
                "scrape_count": tracker.outcome.scrape_count,
            },
        )
