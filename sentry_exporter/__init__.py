"""
Prometheus Sentry Exporter

Exposes per-project event statistics of a Sentry instance as Prometheus metrics.

Package Structure:
    - core: Infrastructure (logging, scrape bookkeeping)
    - domain: Domain models (Organization, Team, Project, MetricSample)
    - collectors: Sentry client and the concurrent scrape pipeline
    - api: HTTP exposition (index page, telemetry path)
"""

__version__ = "1.0.0"
