"""
Exporter metric models

Provides the exposition-side types:
    - MetricDescriptor: name, help text and label names of one metric
    - MetricSample: one labeled value, optionally with an explicit timestamp
    - StatKind: one row of the static statistic-kind table
    - ExporterDescriptors: every descriptor the exporter can produce
    - ScrapeOutcome: summary of a single scrape
"""

from dataclasses import dataclass

GAUGE = "gauge"
COUNTER = "counter"

PROJECT_LABELS = (
    "organization_slug",
    "organization_id",
    "team_slug",
    "team_id",
    "project_slug",
    "project_id",
    "type",
)


@dataclass(frozen=True)
class MetricDescriptor:
    """
    Static description of an exported metric.

    Attributes:
        name: Fully qualified metric name (e.g., "sentry_up")
        documentation: Help text
        labels: Label names, in the order sample label values are given
        kind: "gauge" or "counter"
    """

    name: str
    documentation: str
    labels: tuple[str, ...] = ()
    kind: str = GAUGE

    def __post_init__(self) -> None:
        if self.kind not in (GAUGE, COUNTER):
            raise ValueError(f"Unsupported metric kind: {self.kind}")


@dataclass(frozen=True)
class MetricSample:
    """
    One emitted value.

    Project statistic samples carry the timestamp of the Sentry bucket they
    came from; scrape bookkeeping samples leave it as None so the scraper
    assigns its own.
    """

    descriptor: MetricDescriptor
    labels: tuple[str, ...]
    value: float
    timestamp: float | None = None

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.descriptor.labels):
            raise ValueError(
                f"{self.descriptor.name} expects {len(self.descriptor.labels)} label values, " f"got {len(self.labels)}"
            )

    @property
    def label_dict(self) -> dict[str, str]:
        return dict(zip(self.descriptor.labels, self.labels, strict=True))


@dataclass(frozen=True)
class StatKind:
    """
    Row of the statistic-kind table.

    Attributes:
        name: Value of the "type" label
        query: Value of the ``stat`` query parameter sent to Sentry
        descriptor: Descriptor samples of this kind are emitted under
    """

    name: str
    query: str
    descriptor: MetricDescriptor


@dataclass(frozen=True)
class ExporterDescriptors:
    """Every descriptor one exporter instance can emit."""

    project_events: MetricDescriptor
    up: MetricDescriptor
    scrape_duration: MetricDescriptor
    scrapes_total: MetricDescriptor

    def all(self) -> list[MetricDescriptor]:
        return [self.project_events, self.up, self.scrape_duration, self.scrapes_total]


@dataclass(frozen=True)
class ScrapeOutcome:
    """
    Result of one scrape.

    Attributes:
        up: True if organization pagination finished without an unrecoverable error
        duration_seconds: Wall-clock time of the scrape
        scrape_count: Process-wide scrape total after this scrape
    """

    up: bool
    duration_seconds: float
    scrape_count: int


def build_descriptors(namespace: str = "sentry") -> ExporterDescriptors:
    """
    Build the exporter's descriptors under a metric namespace.

    Args:
        namespace: Metric name prefix (default: "sentry")

    Returns:
        ExporterDescriptors with project, up, duration and scrape counter descriptors

    Example:
        >>> build_descriptors("sentry").up.name
        'sentry_up'
    """
    if not namespace:
        raise ValueError("namespace is required")

    return ExporterDescriptors(
        project_events=MetricDescriptor(
            name=f"{namespace}_project_events_count",
            documentation="project count for received events of a given type",
            labels=PROJECT_LABELS,
        ),
        up=MetricDescriptor(
            name=f"{namespace}_up",
            documentation="boolean, 1 if the sentry instance was reachable, zero if not",
        ),
        scrape_duration=MetricDescriptor(
            name=f"{namespace}_scrape_duration_seconds",
            documentation="wall-clock seconds spent on the last scrape of the sentry instance",
        ),
        scrapes_total=MetricDescriptor(
            name=f"{namespace}_scrapes_total",
            documentation="total number of scrapes of the sentry instance",
            kind=COUNTER,
        ),
    )


def build_stat_kinds(project_descriptor: MetricDescriptor) -> tuple[StatKind, ...]:
    """
    Build the static statistic-kind table.

    Each kind maps the "type" label value to the Sentry ``stat`` query
    parameter and to the descriptor its samples are emitted under.

    Args:
        project_descriptor: Per-project events descriptor

    Returns:
        Immutable table of StatKind rows
    """
    return tuple(
        StatKind(name=name, query=query, descriptor=project_descriptor)
        for name, query in (
            ("received", "received"),
            ("rejected", "rejected"),
            ("blacklisted", "blacklisted"),
        )
    )
