"""
Hierarchy Walker - organization/team/project traversal

Pages through the organization listing and, for every organization,
re-fetches its detail (the listing omits teams and projects). Each
(organization, team, project) triple becomes one FetchJob, submitted
before the next page is requested.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sentry_exporter.collectors.sentry_rest_client import SentryAPIError, SentryRESTClient
from sentry_exporter.core.logging_config import get_logger
from sentry_exporter.domain.sentry import FetchJob, Organization
from sentry_exporter.utils.error_handling import log_and_continue, log_and_return_default

logger = get_logger(__name__)


@dataclass(frozen=True)
class WalkResult:
    """
    Outcome of one traversal.

    Attributes:
        up: False if a page of the organization listing could not be fetched
        page_count: Listing pages fetched successfully
        organization_count: Organizations whose detail was resolved
        skipped_organizations: Organizations skipped because their detail fetch failed
        job_count: Jobs submitted
    """

    up: bool
    page_count: int = 0
    organization_count: int = 0
    skipped_organizations: int = 0
    job_count: int = 0


class HierarchyWalker:
    """
    Enumerates FetchJobs for every project visible to the client.

    Failure handling:
    - Organization detail error: logged, organization skipped, traversal continues
    - Listing page error: logged, paging stops, result reports up=False;
      jobs already submitted are unaffected
    """

    def __init__(self, client: SentryRESTClient):
        self.client = client

    def walk(self, submit: Callable[[FetchJob], None]) -> WalkResult:
        """
        Traverse the hierarchy, submitting one job per project.

        Args:
            submit: Receives each job; may block (bounded queue)

        Returns:
            WalkResult with liveness and counts
        """
        logger.debug("Walking organizations")
        page_count = organization_count = skipped = job_count = 0

        try:
            organizations, link = self.client.list_organizations()
        except SentryAPIError as e:
            log_and_continue(logger, e, {"page": 1}, "Listing organizations", level=logging.ERROR)
            return WalkResult(up=False)

        up = True
        while organizations:
            page_count += 1
            for listed in organizations:
                organization = self._resolve(listed)
                if organization is None:
                    skipped += 1
                    continue

                organization_count += 1
                for job in organization.fetch_jobs():
                    submit(job)
                    job_count += 1

            if not link.results:
                break

            try:
                organizations, link = self.client.get_next_page(link)
            except SentryAPIError as e:
                log_and_continue(
                    logger, e, {"page": page_count + 1, "cursor": link.cursor}, "Listing organizations", logging.ERROR
                )
                up = False
                break
            logger.debug(f"Organization page {page_count + 1}: {len(organizations)} organizations")

        result = WalkResult(
            up=up,
            page_count=page_count,
            organization_count=organization_count,
            skipped_organizations=skipped,
            job_count=job_count,
        )
        logger.debug(f"Finished organizations: {result}")
        return result

    def _resolve(self, listed: Organization) -> Organization | None:
        """Fetch team/project detail for a listed organization; None on failure."""
        try:
            return self.client.get_organization(listed.slug)
        except SentryAPIError as e:
            return log_and_return_default(
                logger,
                e,
                {"organization": listed.slug},
                default_value=None,
                error_type=f"Pulling organization details for {listed.slug}",
                level=logging.ERROR,
            )
