"""
Pytest configuration and shared fixtures

Provides Sentry hierarchy fixtures and an in-memory Sentry client for
exercising the scrape pipeline without HTTP.
"""

import threading
import time

import pytest

from sentry_exporter.collectors.sentry_rest_client import SentryAPIError
from sentry_exporter.collectors.sentry_rest_transformers import PageLink
from sentry_exporter.domain.metrics import build_descriptors, build_stat_kinds
from sentry_exporter.domain.sentry import Organization, Project, StatSample, Team


class FakeSentryClient:
    """
    In-memory stand-in for SentryRESTClient.

    Args:
        pages: Organization listing pages (organizations without teams)
        details: Organization detail by slug; missing slugs raise SentryAPIError
        stats: Series by (project slug, stat); an Exception value is raised
        page_errors: Page numbers (1-based) whose fetch raises SentryAPIError
        stats_delay: Seconds each stats call sleeps (to overlap calls)
    """

    def __init__(self, pages, details, stats=None, page_errors=(), stats_delay=0.0):
        self.pages = pages
        self.details = details
        self.stats = stats or {}
        self.page_errors = set(page_errors)
        self.stats_delay = stats_delay
        self.detail_calls = []
        self.stats_calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def _page(self, number):
        if number in self.page_errors:
            raise SentryAPIError(f"page {number} unavailable", url=f"page-{number}", status_code=502)
        has_next = number < len(self.pages)
        link = PageLink(url=f"page-{number + 1}", cursor=f"{number}:0:0", results=has_next)
        return list(self.pages[number - 1]) if self.pages else [], link

    def list_organizations(self):
        return self._page(1)

    def get_next_page(self, link):
        return self._page(int(link.url.split("-")[1]))

    def get_organization(self, slug):
        self.detail_calls.append(slug)
        if slug not in self.details:
            raise SentryAPIError(f"organization {slug} not found", url=slug, status_code=404)
        return self.details[slug]

    def get_project_stats(self, organization, project, stat, since, until, resolution):
        with self._lock:
            self.stats_calls.append((organization.slug, project.slug, stat, since, until, resolution))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.stats_delay:
                time.sleep(self.stats_delay)
            result = self.stats.get((project.slug, stat), [])
            if isinstance(result, Exception):
                raise result
            return list(result)
        finally:
            with self._lock:
                self.in_flight -= 1


# ===== Domain Fixtures =====


@pytest.fixture
def descriptors():
    return build_descriptors("sentry")


@pytest.fixture
def stat_kinds(descriptors):
    return build_stat_kinds(descriptors.project_events)


@pytest.fixture
def acme_organization():
    """acme (1) / core (2) / api (3), web (4)"""
    return Organization(
        slug="acme",
        id="1",
        teams=(Team(slug="core", id="2", projects=(Project(slug="api", id="3"), Project(slug="web", id="4"))),),
    )


@pytest.fixture
def acme_client(acme_organization):
    """
    Client for the acme example: api returns one received point and a
    rejected error; web returns nothing.
    """
    return FakeSentryClient(
        pages=[[Organization(slug="acme", id="1")]],
        details={"acme": acme_organization},
        stats={
            ("api", "received"): [StatSample(timestamp=100, value=5.0)],
            ("api", "rejected"): SentryAPIError("boom", url="stats", status_code=500),
        },
    )


@pytest.fixture
def organization_factory():
    """Builds one organization with a single team holding ``project_count`` projects."""

    def make_organization(slug, org_id, project_count):
        projects = tuple(Project(slug=f"{slug}-p{i}", id=f"{org_id}{i}") for i in range(project_count))
        team = Team(slug=f"{slug}-team", id=f"{org_id}0", projects=projects)
        return Organization(slug=slug, id=str(org_id), teams=(team,))

    return make_organization


@pytest.fixture
def fake_client_factory():
    return FakeSentryClient
