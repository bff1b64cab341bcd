"""
Secure HTTP Client Wrapper

Provides HTTP GET with enforced SSL verification and timeouts over a
pooled requests session, shared by all exporter worker threads.

Usage:
    from sentry_exporter.http_client import SecureHTTPClient

    client = SecureHTTPClient(timeout=10, pool_size=40)
    response = client.get(url, headers={"Authorization": "Bearer ..."})

Security Features:
    - SSL verification always enabled (verify=True)
    - Timeout on every request; a hung request never blocks longer than it
"""

from typing import Any

import requests
from requests.adapters import HTTPAdapter


class SecureHTTPClient:
    """
    HTTP client with enforced SSL verification, timeouts and connection pooling.

    The connection pool is sized to the number of worker threads so that
    concurrent statistics requests do not queue for connections.
    """

    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, pool_size: int = 10):
        """
        Initialize HTTP client.

        Args:
            timeout: Per-request timeout in seconds (default: 10)
            pool_size: Connections kept per host (default: 10)
        """
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        """
        GET request with SSL verification enforced.

        Args:
            url: URL to fetch
            **kwargs: Additional arguments passed to requests.Session.get()

        Returns:
            requests.Response: HTTP response

        Raises:
            requests.RequestException: On network errors or timeouts
        """
        # CRITICAL: Force SSL verification (prevent man-in-the-middle attacks)
        kwargs["verify"] = True
        kwargs.setdefault("timeout", self.timeout)

        return self.session.get(url, **kwargs)

    def close(self) -> None:
        """Close pooled connections."""
        self.session.close()
