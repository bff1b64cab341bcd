"""
Domain Models - Type-safe data structures for the exporter

This package contains dataclasses representing:
    - sentry: Organization, Team, Project, FetchJob, StatSample
    - metrics: MetricDescriptor, MetricSample, StatKind, ScrapeOutcome

Usage:
    from sentry_exporter.domain.sentry import Organization, Team, Project

    org = Organization(slug="acme", id="1")
"""

from .metrics import (
    ExporterDescriptors,
    MetricDescriptor,
    MetricSample,
    ScrapeOutcome,
    StatKind,
    build_descriptors,
    build_stat_kinds,
)
from .sentry import FetchJob, Organization, Project, StatSample, Team

__all__ = [
    # Sentry hierarchy
    "Organization",
    "Team",
    "Project",
    "FetchJob",
    "StatSample",
    # Exposition
    "MetricDescriptor",
    "MetricSample",
    "StatKind",
    "ExporterDescriptors",
    "ScrapeOutcome",
    "build_descriptors",
    "build_stat_kinds",
]
