"""
Sentry REST API Response Transformers

Converts Sentry web API JSON into the exporter's immutable domain models.

Usage:
    from sentry_exporter.collectors.sentry_rest_transformers import SentryTransformer

    # REST API returns:
    rest_response = {"slug": "acme", "id": "1", "teams": [{"slug": "core", "id": "2", "projects": [...]}]}

    organization = SentryTransformer.transform_organization(rest_response)
"""

from dataclasses import dataclass
from typing import Any

from sentry_exporter.domain.sentry import Organization, Project, StatSample, Team


class TransformError(ValueError):
    """Raised when a response does not have the expected shape."""

    pass


@dataclass(frozen=True)
class PageLink:
    """
    One pagination link parsed from Sentry's ``Link`` header.

    Sentry always returns a "next" link; ``results`` tells whether
    following it yields anything.

    Attributes:
        url: Absolute URL of the page
        cursor: Opaque cursor value
        results: Whether the page holds results
    """

    url: str
    cursor: str = ""
    results: bool = False

    @classmethod
    def from_link(cls, link: dict[str, str] | None) -> "PageLink":
        """
        Build from one entry of ``requests.Response.links``.

        Example:
            >>> PageLink.from_link({"url": "https://s/api/0/organizations/?cursor=1:1:0",
            ...                     "rel": "next", "results": "true", "cursor": "1:1:0"}).results
            True
        """
        if not link or not link.get("url"):
            return cls(url="")
        return cls(
            url=link["url"],
            cursor=link.get("cursor", ""),
            results=link.get("results", "false").lower() == "true",
        )


class SentryTransformer:
    """
    Transform Sentry REST responses to domain models.

    Handles:
    - Organization listings (no team detail)
    - Organization detail with teams and their projects
    - Project statistics series
    """

    @staticmethod
    def _require_object(data: Any, kind: str) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise TransformError(f"{kind} response must be an object, got {type(data).__name__}")
        return data

    @staticmethod
    def _members(data: dict[str, Any], key: str, kind: str) -> list[Any]:
        members = data.get(key) or []
        if not isinstance(members, list):
            raise TransformError(f"{kind} '{key}' must be a list, got {type(members).__name__}")
        return members

    @staticmethod
    def _identifier(data: dict[str, Any], key: str, kind: str) -> str:
        value = data.get(key)
        if value is None or value == "":
            raise TransformError(f"{kind} response is missing '{key}'")
        return str(value)

    @staticmethod
    def transform_project(data: dict[str, Any]) -> Project:
        data = SentryTransformer._require_object(data, "Project")
        return Project(
            slug=SentryTransformer._identifier(data, "slug", "Project"),
            id=SentryTransformer._identifier(data, "id", "Project"),
        )

    @staticmethod
    def transform_team(data: dict[str, Any]) -> Team:
        data = SentryTransformer._require_object(data, "Team")
        return Team(
            slug=SentryTransformer._identifier(data, "slug", "Team"),
            id=SentryTransformer._identifier(data, "id", "Team"),
            projects=tuple(
                SentryTransformer.transform_project(p) for p in SentryTransformer._members(data, "projects", "Team")
            ),
        )

    @staticmethod
    def transform_organization(data: dict[str, Any]) -> Organization:
        """
        Transform an organization response.

        Listing entries carry no "teams" key and produce an organization
        without teams; detail responses embed teams and their projects.

        Args:
            data: Organization JSON object

        Returns:
            Organization

        Raises:
            TransformError: If the response, a team or a project is not an
                object, or lacks identifiers
        """
        data = SentryTransformer._require_object(data, "Organization")

        return Organization(
            slug=SentryTransformer._identifier(data, "slug", "Organization"),
            id=SentryTransformer._identifier(data, "id", "Organization"),
            teams=tuple(
                SentryTransformer.transform_team(t) for t in SentryTransformer._members(data, "teams", "Organization")
            ),
        )

    @staticmethod
    def transform_organizations(data: Any) -> list[Organization]:
        """
        Transform an organization listing page.

        Raises:
            TransformError: If the response is not a list
        """
        if not isinstance(data, list):
            raise TransformError(f"Organization listing must be a list, got {type(data).__name__}")
        return [SentryTransformer.transform_organization(item) for item in data]

    @staticmethod
    def transform_stats(data: Any) -> list[StatSample]:
        """
        Transform a project stats series.

        REST Response:
            [[1700000000, 5], [1700000010, 0], ...]

        Order is preserved as returned by Sentry.

        Raises:
            TransformError: If the response is not a list of [timestamp, value] pairs
        """
        if not isinstance(data, list):
            raise TransformError(f"Stats response must be a list, got {type(data).__name__}")

        samples = []
        for point in data:
            if not isinstance(point, list | tuple) or len(point) != 2:
                raise TransformError(f"Stats point must be a [timestamp, value] pair, got {point!r}")
            try:
                samples.append(StatSample(timestamp=int(point[0]), value=float(point[1])))
            except (TypeError, ValueError) as e:
                raise TransformError(f"Stats point is not numeric: {point!r}") from e
        return samples
