"""
Data Collectors - Fetch metrics from Sentry

This package contains the scrape pipeline:
    - sentry_rest_client: Sentry web API access
    - hierarchy_walker: organization/team/project traversal
    - worker_pool: bounded fan-out of per-project jobs
    - stat_fetcher: per-project statistics to samples
    - exporter: scrape orchestration and Prometheus collector
"""

__all__ = []
