#!/usr/bin/env python3
"""
Exporter Runner Script

Starts the Prometheus Sentry exporter: resolves configuration, registers
the Sentry collector and serves the telemetry endpoint.

Usage:
    python -m sentry_exporter.run_exporter --sentry.url https://sentry.example.com
    SENTRY_URL=... SENTRY_AUTH_TOKEN=... sentry-exporter --sentry.concurrency 20
"""

import argparse
import sys

import uvicorn
from prometheus_client import CollectorRegistry

from sentry_exporter.api.app import create_app
from sentry_exporter.collectors.exporter import SentryCollector, SentryExporter
from sentry_exporter.collectors.sentry_rest_client import get_sentry_rest_client
from sentry_exporter.core import get_logger, setup_logging
from sentry_exporter.core.logging_config import LOG_LEVELS
from sentry_exporter.secure_config import ConfigurationError, get_config

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export Sentry project event statistics to Prometheus")
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        default=":9096",
        help="The host:port to listen on for HTTP requests",
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="telemetry_path",
        default="/metrics",
        help="Path under which to expose metrics",
    )
    parser.add_argument(
        "--sentry.url",
        dest="sentry_url",
        default="",
        help="http url for the sentry instance to talk to. Can be specified via environment variable SENTRY_URL",
    )
    parser.add_argument(
        "--sentry.auth-token",
        dest="sentry_auth_token",
        default="",
        help="bearer token to use for authorization. Can be specified via environment variable SENTRY_AUTH_TOKEN",
    )
    parser.add_argument(
        "--sentry.timeout",
        dest="sentry_timeout",
        type=float,
        default=10.0,
        help="http timeout in seconds to enforce for sentry requests",
    )
    parser.add_argument(
        "--sentry.concurrency",
        dest="sentry_concurrency",
        type=int,
        default=40,
        help="level of concurrent stats requests to allow against the given sentry",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default="info",
        type=str.lower,
        choices=LOG_LEVELS,
        help="log level",
    )
    parser.add_argument(
        "--log.json",
        dest="log_json",
        action="store_true",
        help="emit structured JSON logs",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the exporter."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, json_output=args.log_json)

    config = get_config()
    try:
        sentry_config = config.get_sentry_config(
            url=args.sentry_url,
            auth_token=args.sentry_auth_token,
            timeout_seconds=args.sentry_timeout,
            concurrency=args.sentry_concurrency,
        )
        web_config = config.get_web_config(listen_address=args.listen_address, telemetry_path=args.telemetry_path)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    client = get_sentry_rest_client(sentry_config)
    exporter = SentryExporter(client, max_workers=sentry_config.concurrency, namespace="sentry")

    registry = CollectorRegistry()
    registry.register(SentryCollector(exporter))
    app = create_app(registry, telemetry_path=web_config.telemetry_path)

    logger.info(f"Starting server; telemetry accessible at {web_config.listen_address}{web_config.telemetry_path}")
    try:
        uvicorn.run(app, host=web_config.host, port=web_config.port, log_level=args.log_level, log_config=None)
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
