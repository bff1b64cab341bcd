"""
Sentry domain models - Organization hierarchy and statistics

Represents the parts of a Sentry instance the exporter walks:
    - Organization -> Team -> Project hierarchy
    - FetchJob: one (organization, team, project) unit of work
    - StatSample: one point of a project statistics time series

All models are frozen: they are built once per scrape from API responses
and handed to worker threads by value.
"""

from dataclasses import dataclass, field


def _require_identifiers(kind: str, slug: str, id: str) -> None:
    if not slug:
        raise ValueError(f"{kind} slug must be non-empty")
    if not id:
        raise ValueError(f"{kind} id must be non-empty (slug={slug})")


@dataclass(frozen=True)
class Project:
    """
    A Sentry project.

    Attributes:
        slug: URL-safe project identifier (e.g., "api")
        id: Numeric project id as returned by Sentry (a JSON string)
    """

    slug: str
    id: str

    def __post_init__(self) -> None:
        _require_identifiers("Project", self.slug, self.id)


@dataclass(frozen=True)
class Team:
    """
    A Sentry team and the projects it owns.

    Attributes:
        slug: URL-safe team identifier
        id: Numeric team id as returned by Sentry
        projects: Projects owned by the team
    """

    slug: str
    id: str
    projects: tuple[Project, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _require_identifiers("Team", self.slug, self.id)


@dataclass(frozen=True)
class Organization:
    """
    A Sentry organization.

    The organization listing endpoint returns organizations without teams;
    only the organization detail endpoint fills in ``teams``.

    Example:
        org = Organization(
            slug="acme",
            id="1",
            teams=(Team(slug="core", id="2", projects=(Project(slug="api", id="3"),)),),
        )
        for job in org.fetch_jobs():
            print(job.project.slug)
    """

    slug: str
    id: str
    teams: tuple[Team, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _require_identifiers("Organization", self.slug, self.id)

    def fetch_jobs(self) -> list["FetchJob"]:
        """
        Expand the organization into one FetchJob per (team, project) pair.

        Returns:
            Jobs in team order, then project order
        """
        return [
            FetchJob(organization=self, team=team, project=project) for team in self.teams for project in team.projects
        ]


@dataclass(frozen=True)
class FetchJob:
    """
    Unit of work for the worker pool: fetch every statistic kind for one project.
    """

    organization: Organization
    team: Team
    project: Project

    @property
    def label_values(self) -> tuple[str, ...]:
        """Identifier labels in exposition order (without the stat type)."""
        return (
            self.organization.slug,
            self.organization.id,
            self.team.slug,
            self.team.id,
            self.project.slug,
            self.project.id,
        )

    def __str__(self) -> str:
        return f"{self.organization.slug}/{self.team.slug}/{self.project.slug}"


@dataclass(frozen=True)
class StatSample:
    """
    One bucket of a project statistics series.

    Attributes:
        timestamp: Bucket start, unix seconds
        value: Event count in the bucket
    """

    timestamp: int
    value: float
