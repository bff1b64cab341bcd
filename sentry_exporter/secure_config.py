"""
Secure Configuration Management

Provides centralized, validated configuration for the exporter.
Command-line values win; empty values fall back to environment variables
(optionally loaded from a .env file).

Usage:
    from sentry_exporter.secure_config import get_config

    config = get_config()
    sentry_config = config.get_sentry_config(url=args.sentry_url)
    print(sentry_config.api_url)

Security Features:
    - Fail-fast on missing/invalid configuration
    - Placeholder detection for the auth token (e.g., "your_token_here")
    - Credentials never included in error messages

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


SENTRY_URL_ENV = "SENTRY_URL"
SENTRY_AUTH_TOKEN_ENV = "SENTRY_AUTH_TOKEN"


@dataclass
class SentryConfig:
    """
    Validated Sentry connection configuration.

    Attributes:
        url: Base URL of the Sentry instance (no trailing slash)
        auth_token: Bearer token used for API requests
        timeout_seconds: Per-request HTTP timeout
        concurrency: Maximum concurrent statistics requests (worker pool size)
    """

    url: str
    auth_token: str
    timeout_seconds: float = 10.0
    concurrency: int = 40

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.url = (self.url or "").rstrip("/")
        self._validate()

    def _validate(self):
        """
        Validate Sentry configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.url:
            raise ConfigurationError(f"{SENTRY_URL_ENV} is required")

        if not re.match(r"^https?://[^/\s]+", self.url):
            raise ConfigurationError(f"{SENTRY_URL_ENV} must be an http(s) URL: {self.url}")

        if not self.auth_token:
            raise ConfigurationError(f"{SENTRY_AUTH_TOKEN_ENV} is required")

        placeholders = ["your_token", "your_auth_token", "placeholder", "replace_me", "changeme"]
        if any(placeholder in self.auth_token.lower() for placeholder in placeholders):
            raise ConfigurationError(
                f"{SENTRY_AUTH_TOKEN_ENV} contains a placeholder value - please set a real auth token"
            )

        if self.timeout_seconds <= 0:
            raise ConfigurationError(f"sentry timeout must be > 0 seconds, got {self.timeout_seconds}")

        if self.concurrency < 1:
            raise ConfigurationError(f"sentry concurrency needs to be >= 1, got {self.concurrency}")

    @property
    def api_url(self) -> str:
        """Root of the Sentry web API (``<url>/api/0/``)."""
        return f"{self.url}/api/0/"


@dataclass
class WebConfig:
    """
    Validated HTTP exposition configuration.

    Attributes:
        listen_address: host:port to listen on; an empty host binds all interfaces
        telemetry_path: Path the metrics are served under
    """

    listen_address: str = ":9096"
    telemetry_path: str = "/metrics"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate web configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        host, sep, port = self.listen_address.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ConfigurationError(f"listen address must be host:port, got {self.listen_address!r}")

        if not self.telemetry_path.startswith("/"):
            raise ConfigurationError(f"telemetry path must start with '/', got {self.telemetry_path!r}")

        if self.telemetry_path == "/":
            raise ConfigurationError("telemetry path must not be '/' (reserved for the index page)")

    @property
    def host(self) -> str:
        host = self.listen_address.rpartition(":")[0].strip("[]")
        return host or "0.0.0.0"  # nosec B104

    @property
    def port(self) -> int:
        return int(self.listen_address.rpartition(":")[2])


class SecureConfig:
    """
    Centralized configuration manager.

    Resolves exporter configuration from explicit values and environment
    variables, with fail-fast validation.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_sentry_config(
        self,
        url: str | None = None,
        auth_token: str | None = None,
        timeout_seconds: float = 10.0,
        concurrency: int = 40,
    ) -> SentryConfig:
        """
        Get validated Sentry configuration.

        Args:
            url: Sentry base URL (falls back to SENTRY_URL)
            auth_token: Bearer token (falls back to SENTRY_AUTH_TOKEN)
            timeout_seconds: Per-request timeout
            concurrency: Worker pool size

        Returns:
            SentryConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        url = url or os.getenv(SENTRY_URL_ENV)
        if not url:
            raise ConfigurationError(
                f"neither --sentry.url nor environment variable {SENTRY_URL_ENV} was defined; this is required"
            )

        auth_token = auth_token or os.getenv(SENTRY_AUTH_TOKEN_ENV)
        if not auth_token:
            raise ConfigurationError(
                "neither --sentry.auth-token nor environment variable "
                f"{SENTRY_AUTH_TOKEN_ENV} was defined; this is required"
            )

        return SentryConfig(
            url=url,
            auth_token=auth_token,
            timeout_seconds=timeout_seconds,
            concurrency=concurrency,
        )

    def get_web_config(self, listen_address: str = ":9096", telemetry_path: str = "/metrics") -> WebConfig:
        """
        Get validated web configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        return WebConfig(listen_address=listen_address, telemetry_path=telemetry_path)


_config_instance = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        SecureConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance
