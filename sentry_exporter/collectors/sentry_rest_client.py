"""
Sentry REST API Client

Provides the fetch operations the exporter needs from a Sentry instance's
web API (``<url>/api/0/``). Shared by all worker threads.

No retries are performed: each call is one HTTP request, bounded by the
client's per-request timeout. Failures surface as SentryAPIError.

Usage:
    from sentry_exporter.collectors.sentry_rest_client import get_sentry_rest_client

    client = get_sentry_rest_client(sentry_config)

    organizations, link = client.list_organizations()
    while link.results:
        more, link = client.get_next_page(link)

    organization = client.get_organization("acme")
    series = client.get_project_stats(organization, project, "received", since, until, "10s")

API Documentation:
    https://docs.sentry.io/api/
"""

from typing import Any
from urllib.parse import quote, urljoin

import requests

from sentry_exporter.collectors.sentry_rest_transformers import PageLink, SentryTransformer, TransformError
from sentry_exporter.core.logging_config import get_logger
from sentry_exporter.domain.sentry import Organization, Project, StatSample
from sentry_exporter.http_client import SecureHTTPClient
from sentry_exporter.secure_config import SentryConfig

logger = get_logger(__name__)


class SentryAPIError(Exception):
    """
    Raised when a Sentry API request fails.

    Attributes:
        url: Requested URL
        status_code: HTTP status, or None for network/decoding errors
    """

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SentryRESTClient:
    """
    Sentry web API client using direct HTTP calls.

    Features:
    - Bearer token authentication
    - Link-header cursor pagination for organization listings
    - Response validation into immutable domain models
    """

    def __init__(self, api_url: str, auth_token: str, http_client: SecureHTTPClient | None = None):
        """
        Initialize Sentry REST client.

        Args:
            api_url: API root, e.g. https://sentry.example.com/api/0/
            auth_token: Bearer token for authentication
            http_client: HTTP client to use (default: SecureHTTPClient with default timeout)

        Raises:
            ValueError: If api_url or auth_token is empty
        """
        if not api_url or not auth_token:
            raise ValueError("api_url and auth_token are required")

        self.api_url = api_url.rstrip("/") + "/"
        self.auth_header = {
            "Authorization": f"Bearer {auth_token}",
            "Accept": "application/json",
        }
        self.http_client = http_client or SecureHTTPClient()

    def _build_url(self, *segments: str) -> str:
        """
        Build an API URL from path segments.

        Example:
            _build_url("organizations", "acme")
            -> "https://sentry.example.com/api/0/organizations/acme/"
        """
        path = "".join(f"{quote(segment, safe='')}/" for segment in segments)
        return urljoin(self.api_url, path)

    def _request(self, url: str, params: dict[str, Any] | None = None) -> requests.Response:
        """
        Execute one GET request.

        Raises:
            SentryAPIError: On network errors, timeouts or non-2xx responses
        """
        try:
            response = self.http_client.get(url, headers=self.auth_header, params=params)
        except requests.RequestException as e:
            raise SentryAPIError(f"request to {url} failed: {e}", url=url) from e

        if not response.ok:
            raise SentryAPIError(
                f"request to {url} returned HTTP {response.status_code}: {response.text[:200]}",
                url=url,
                status_code=response.status_code,
            )
        return response

    def _decode(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise SentryAPIError(f"invalid JSON from {response.url}: {e}", url=response.url) from e

    def _organization_page(self, url: str) -> tuple[list[Organization], PageLink]:
        response = self._request(url)
        try:
            organizations = SentryTransformer.transform_organizations(self._decode(response))
        except ValueError as e:
            raise SentryAPIError(f"unexpected organization listing from {url}: {e}", url=url) from e

        link = PageLink.from_link(response.links.get("next"))
        logger.debug(f"Fetched {len(organizations)} organizations from {url} (more={link.results})")
        return organizations, link

    # ==============================
    # Organization APIs
    # ==============================

    def list_organizations(self) -> tuple[list[Organization], PageLink]:
        """
        List the first page of organizations visible to the token.

        REST Endpoint: GET /api/0/organizations/

        Returns:
            (organizations without team detail, link to the next page)

        Raises:
            SentryAPIError: If the request fails
        """
        return self._organization_page(self._build_url("organizations"))

    def get_next_page(self, link: PageLink) -> tuple[list[Organization], PageLink]:
        """
        Follow a pagination link of the organization listing.

        Args:
            link: Link returned by list_organizations() or a previous call

        Returns:
            (organizations on that page, link to the following page)

        Raises:
            SentryAPIError: If the request fails
            ValueError: If the link has no URL
        """
        if not link.url:
            raise ValueError("pagination link has no URL")
        return self._organization_page(link.url)

    def get_organization(self, slug: str) -> Organization:
        """
        Get organization detail, including teams and their projects.

        REST Endpoint: GET /api/0/organizations/{slug}/

        Raises:
            SentryAPIError: If the request fails or the response is malformed
        """
        url = self._build_url("organizations", slug)
        response = self._request(url)
        try:
            return SentryTransformer.transform_organization(self._decode(response))
        except ValueError as e:
            raise SentryAPIError(f"unexpected organization detail from {url}: {e}", url=url) from e

    # ==============================
    # Project Stats APIs
    # ==============================

    def get_project_stats(
        self,
        organization: Organization,
        project: Project,
        stat: str,
        since: int,
        until: int,
        resolution: str,
    ) -> list[StatSample]:
        """
        Get an event count series for a project.

        REST Endpoint: GET /api/0/projects/{org}/{project}/stats/?stat=&since=&until=&resolution=

        Args:
            organization: Owning organization
            project: Project to query
            stat: Stat name (received, rejected, blacklisted)
            since: Window start, unix seconds
            until: Window end, unix seconds
            resolution: Bucket width (e.g., "10s")

        Returns:
            Series in the order Sentry returned it

        Raises:
            SentryAPIError: If the request fails or the response is malformed
        """
        url = self._build_url("projects", organization.slug, project.slug, "stats")
        params = {"stat": stat, "since": since, "until": until, "resolution": resolution}
        response = self._request(url, params=params)
        try:
            return SentryTransformer.transform_stats(self._decode(response))
        except TransformError as e:
            raise SentryAPIError(f"unexpected stats from {url}: {e}", url=url) from e

    def close(self) -> None:
        self.http_client.close()


def get_sentry_rest_client(sentry_config: SentryConfig) -> SentryRESTClient:
    """
    Get Sentry REST client for a validated configuration.

    The HTTP connection pool is sized to the configured concurrency.

    Args:
        sentry_config: Validated Sentry configuration

    Returns:
        SentryRESTClient: Authenticated REST client
    """
    http_client = SecureHTTPClient(timeout=sentry_config.timeout_seconds, pool_size=sentry_config.concurrency)
    return SentryRESTClient(api_url=sentry_config.api_url, auth_token=sentry_config.auth_token, http_client=http_client)
