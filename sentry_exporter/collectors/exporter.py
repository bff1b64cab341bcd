"""
Sentry Exporter - scrape orchestration and snapshot emission

Runs one full scrape per collect() call:

    1. Start the worker pool (bounded queue, fixed thread count)
    2. Walk organizations -> teams -> projects, submitting one job per project
    3. Close the pool and wait for every worker (barrier)
    4. Emit liveness, scrape counter and scrape duration

Project samples stream out while workers run; the three bookkeeping
samples are always the last ones of a scrape.

Usage:
    from prometheus_client import REGISTRY

    exporter = SentryExporter(client, max_workers=40)
    REGISTRY.register(SentryCollector(exporter))
"""

import threading
from collections.abc import Iterator, Sequence
from functools import partial

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

from sentry_exporter.collectors.hierarchy_walker import HierarchyWalker
from sentry_exporter.collectors.sample_channel import SampleChannel
from sentry_exporter.collectors.sentry_rest_client import SentryRESTClient
from sentry_exporter.collectors.stat_fetcher import DEFAULT_LOOKBACK_SECONDS, DEFAULT_RESOLUTION, StatFetcher
from sentry_exporter.collectors.worker_pool import WorkerPool
from sentry_exporter.core.logging_config import get_logger
from sentry_exporter.core.scrape_metrics import ScrapeBookkeeper, track_scrape
from sentry_exporter.domain.metrics import (
    COUNTER,
    MetricDescriptor,
    MetricSample,
    ScrapeOutcome,
    StatKind,
    build_descriptors,
    build_stat_kinds,
)

logger = get_logger(__name__)


class SentryExporter:
    """
    Concurrent collection engine for one Sentry instance.

    Attributes:
        descriptors: Every descriptor this exporter emits
        stat_kinds: Static statistic-kind table
        max_workers: Worker pool size (maximum concurrent stats fetches)
        bookkeeper: Process-wide scrape totals

    Note:
        Overlapping collect() calls are not serialized; each runs its own
        pool, and both update the shared bookkeeper.
    """

    def __init__(
        self,
        client: SentryRESTClient,
        max_workers: int,
        namespace: str = "sentry",
        stat_kinds: Sequence[StatKind] | None = None,
        resolution: str = DEFAULT_RESOLUTION,
        lookback_seconds: int = DEFAULT_LOOKBACK_SECONDS,
        bookkeeper: ScrapeBookkeeper | None = None,
    ):
        """
        Args:
            client: Sentry REST client shared by the walker and all workers
            max_workers: Worker pool size; callers validate it is >= 1
            namespace: Metric name prefix
            stat_kinds: Statistic-kind table (default: received, rejected, blacklisted)
            resolution: Stats bucket width
            lookback_seconds: Stats window length
            bookkeeper: Scrape totals (default: a new bookkeeper owned by this exporter)
        """
        self.descriptors = build_descriptors(namespace)
        self.stat_kinds = (
            tuple(stat_kinds) if stat_kinds is not None else build_stat_kinds(self.descriptors.project_events)
        )
        self.max_workers = max_workers
        self.walker = HierarchyWalker(client)
        self.fetcher = StatFetcher(client, self.stat_kinds, resolution=resolution, lookback_seconds=lookback_seconds)
        self.bookkeeper = bookkeeper or ScrapeBookkeeper()

    def describe(self) -> list[MetricDescriptor]:
        """
        List every metric this exporter can produce. Static, side-effect free.
        """
        descriptors = self.descriptors.all()
        for kind in self.stat_kinds:
            if kind.descriptor not in descriptors:
                descriptors.append(kind.descriptor)
        return descriptors

    def scrape(self, channel: SampleChannel) -> ScrapeOutcome:
        """
        Run one scrape, sending every sample on ``channel``.

        Never raises for fetch failures; an unexpected error during traversal
        is logged and reported as up=0. The channel is left open.

        Returns:
            ScrapeOutcome for this scrape
        """
        handler = partial(self.fetcher.fetch, channel=channel)

        with track_scrape(self.bookkeeper) as tracker:
            with WorkerPool(handler, self.max_workers) as pool:
                try:
                    result = self.walker.walk(pool.submit)
                except Exception:
                    logger.exception("Unexpected error walking organizations")
                else:
                    tracker.up = result.up
                    tracker.organization_count = result.organization_count
                    tracker.job_count = result.job_count
                    if not result.up:
                        logger.error("Failed spawning organizations; reporting sentry as down")

        outcome = tracker.outcome
        channel.send(MetricSample(self.descriptors.up, (), 1.0 if outcome.up else 0.0))
        channel.send(MetricSample(self.descriptors.scrapes_total, (), float(outcome.scrape_count)))
        channel.send(MetricSample(self.descriptors.scrape_duration, (), outcome.duration_seconds))
        return outcome

    def collect(self) -> Iterator[MetricSample]:
        """
        Trigger one full scrape and stream its samples.

        The scrape runs on a background thread; samples are yielded as
        workers produce them. The iterator ends once the scrape is complete.
        """
        channel = SampleChannel()

        def run() -> None:
            try:
                self.scrape(channel)
            except Exception:
                logger.exception("Scrape aborted")
            finally:
                channel.close()

        thread = threading.Thread(target=run, name="sentry-scrape", daemon=True)
        thread.start()
        try:
            yield from channel
        finally:
            thread.join()


def _metric_family(descriptor: MetricDescriptor) -> Metric:
    if descriptor.kind == COUNTER:
        return CounterMetricFamily(descriptor.name, descriptor.documentation, labels=list(descriptor.labels))
    return GaugeMetricFamily(descriptor.name, descriptor.documentation, labels=list(descriptor.labels))


class SentryCollector:
    """
    prometheus_client custom collector backed by a SentryExporter.

    Groups the exporter's sample stream into one metric family per
    descriptor; project samples keep their Sentry bucket timestamps.
    """

    def __init__(self, exporter: SentryExporter):
        self.exporter = exporter

    def describe(self) -> Iterator[Metric]:
        for descriptor in self.exporter.describe():
            yield _metric_family(descriptor)

    def collect(self) -> Iterator[Metric]:
        families = {descriptor.name: _metric_family(descriptor) for descriptor in self.exporter.describe()}

        for sample in self.exporter.collect():
            family = families.get(sample.descriptor.name)
            if family is None:
                family = families[sample.descriptor.name] = _metric_family(sample.descriptor)
            family.add_metric(list(sample.labels), sample.value, timestamp=sample.timestamp)

        yield from families.values()
