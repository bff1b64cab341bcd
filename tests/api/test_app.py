"""
Tests for the FastAPI exposition app

Uses FastAPI's TestClient with a registry holding a SentryCollector
backed by the in-memory Sentry client.
"""

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry

from sentry_exporter.api.app import create_app
from sentry_exporter.collectors.exporter import SentryCollector, SentryExporter


@pytest.fixture
def exporter(acme_client):
    return SentryExporter(acme_client, max_workers=2)


@pytest.fixture
def registry(exporter):
    registry = CollectorRegistry()
    registry.register(SentryCollector(exporter))
    return registry


class TestIndexPage:
    def test_links_to_telemetry_path(self, registry):
        client = TestClient(create_app(registry, telemetry_path="/sentry-metrics"))

        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert '<a href="/sentry-metrics">' in response.text


class TestTelemetryEndpoint:
    """Test the metrics route"""

    def test_serves_prometheus_text(self, registry):
        client = TestClient(create_app(registry))

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"] == CONTENT_TYPE_LATEST
        assert "sentry_up 1.0" in response.text
        assert 'project_slug="api"' in response.text

    def test_each_request_is_one_scrape(self, registry, exporter):
        client = TestClient(create_app(registry))

        client.get("/metrics")
        response = client.get("/metrics")

        assert exporter.bookkeeper.scrape_count == 2
        assert "sentry_scrapes_total 2.0" in response.text

    def test_custom_path(self, registry):
        client = TestClient(create_app(registry, telemetry_path="/custom"))

        assert client.get("/custom").status_code == 200
        assert client.get("/metrics").status_code == 404

    def test_api_docs_disabled(self, registry):
        client = TestClient(create_app(registry))

        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404
