"""
FastAPI Application - Prometheus exposition for the Sentry exporter

Routes:
    GET /                  index page linking to the telemetry path
    GET <telemetry_path>   Prometheus text format (triggers one scrape)

The telemetry endpoint is a plain (sync) function so the blocking scrape
runs in FastAPI's threadpool instead of on the event loop.

Usage:
    app = create_app(registry, telemetry_path="/metrics")
    uvicorn.run(app, host="0.0.0.0", port=9096)
"""

import html

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from sentry_exporter import __version__
from sentry_exporter.core import get_logger

logger = get_logger(__name__)

INDEX_PAGE = """<html>
	<head><title>prometheus_sentry_exporter</title></head>
	<body>
		<li>prometheus metrics endpoint: <a href="{path}"><code>{path}</code></a></li>
	</body>
</html>
"""


def create_app(registry: CollectorRegistry, telemetry_path: str = "/metrics") -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry: Registry holding the Sentry collector
        telemetry_path: Path the metrics are served under

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Prometheus Sentry Exporter",
        description="Per-project Sentry event statistics in Prometheus format",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    index_page = INDEX_PAGE.format(path=html.escape(telemetry_path, quote=True))

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def index() -> str:
        return index_page

    @app.get(telemetry_path, include_in_schema=False)
    def metrics() -> Response:
        """Render every registered collector; runs one scrape of Sentry."""
        logger.debug("Serving telemetry request")
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return app
