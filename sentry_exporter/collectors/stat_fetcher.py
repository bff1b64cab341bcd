"""
Stat Fetcher - per-project statistics to samples

For one FetchJob, queries every statistic kind over a trailing window and
sends the most recent bucket of each series as a MetricSample.
"""

import time
from collections.abc import Callable, Sequence

from sentry_exporter.collectors.sample_channel import SampleChannel
from sentry_exporter.collectors.sentry_rest_client import SentryAPIError, SentryRESTClient
from sentry_exporter.core.logging_config import get_logger
from sentry_exporter.domain.metrics import MetricSample, StatKind
from sentry_exporter.domain.sentry import FetchJob
from sentry_exporter.utils.error_handling import log_and_continue

logger = get_logger(__name__)

DEFAULT_RESOLUTION = "10s"
DEFAULT_LOOKBACK_SECONDS = 60


class StatFetcher:
    """
    Fetches project statistics and reduces each series to its current value.

    A failed or empty series only drops that one (job, kind) pair; the
    other kinds of the same job are still fetched and emitted.
    """

    def __init__(
        self,
        client: SentryRESTClient,
        stat_kinds: Sequence[StatKind],
        resolution: str = DEFAULT_RESOLUTION,
        lookback_seconds: int = DEFAULT_LOOKBACK_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            client: Sentry REST client
            stat_kinds: Static statistic-kind table
            resolution: Bucket width requested from Sentry (e.g., "10s")
            lookback_seconds: Length of the trailing window, independent of resolution
            clock: Wall-clock source returning unix seconds
        """
        if lookback_seconds <= 0:
            raise ValueError(f"lookback_seconds must be > 0, got {lookback_seconds}")

        self.client = client
        self.stat_kinds = tuple(stat_kinds)
        self.resolution = resolution
        self.lookback_seconds = lookback_seconds
        self.clock = clock

    def fetch(self, job: FetchJob, channel: SampleChannel) -> int:
        """
        Fetch every statistic kind for one project.

        Args:
            job: Organization/team/project to query
            channel: Channel the samples are sent on

        Returns:
            Number of samples sent
        """
        logger.debug(f"Pulling project stats for {job}")

        until = int(self.clock())
        since = until - self.lookback_seconds
        sent = 0

        for kind in self.stat_kinds:
            try:
                series = self.client.get_project_stats(
                    job.organization,
                    job.project,
                    kind.query,
                    since,
                    until,
                    self.resolution,
                )
            except SentryAPIError as e:
                log_and_continue(
                    logger,
                    e,
                    context={"organization": job.organization.slug, "project": job.project.slug, "stat": kind.name},
                    error_type=f"Fetching stat type {kind.name} for project {job.project.slug}",
                )
                continue

            if not series:
                logger.warning(f"Requested stat type {kind.name} for project {job.project.slug} returned no results")
                continue

            # Sentry returns buckets oldest first; the last one is taken as-is
            last = series[-1]
            logger.debug(f"Stat type {kind.name} for project {job.project.slug} returned {len(series)} points")

            channel.send(
                MetricSample(
                    descriptor=kind.descriptor,
                    labels=(*job.label_values, kind.name),
                    value=last.value,
                    timestamp=float(last.timestamp),
                )
            )
            sent += 1

        logger.debug(f"Finished project stats for {job} ({sent} samples)")
        return sent
