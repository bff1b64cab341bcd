"""
Tests for Sentry domain models

Tests cover:
- Identifier validation
- Job expansion order
- Label values
- Immutability
"""

import dataclasses

import pytest

from sentry_exporter.domain.sentry import FetchJob, Organization, Project, StatSample, Team


class TestIdentifiers:
    """Test non-empty identifier validation"""

    @pytest.mark.parametrize("model", [Project, Team, Organization])
    def test_empty_slug_rejected(self, model):
        with pytest.raises(ValueError, match="slug must be non-empty"):
            model(slug="", id="1")

    @pytest.mark.parametrize("model", [Project, Team, Organization])
    def test_empty_id_rejected(self, model):
        with pytest.raises(ValueError, match="id must be non-empty"):
            model(slug="x", id="")

    def test_models_are_frozen(self):
        project = Project(slug="api", id="3")

        with pytest.raises(dataclasses.FrozenInstanceError):
            project.slug = "web"


class TestFetchJobs:
    """Test organization expansion into jobs"""

    def test_acme_expansion(self, acme_organization):
        jobs = acme_organization.fetch_jobs()

        assert [str(job) for job in jobs] == ["acme/core/api", "acme/core/web"]

    def test_team_then_project_order(self):
        org = Organization(
            slug="o",
            id="1",
            teams=(
                Team(slug="t1", id="2", projects=(Project(slug="b", id="4"), Project(slug="a", id="3"))),
                Team(slug="t2", id="5", projects=(Project(slug="c", id="6"),)),
            ),
        )

        assert [job.project.slug for job in org.fetch_jobs()] == ["b", "a", "c"]

    def test_listing_organization_has_no_jobs(self):
        assert Organization(slug="acme", id="1").fetch_jobs() == []

    def test_label_values(self, acme_organization):
        job = acme_organization.fetch_jobs()[1]

        assert job.label_values == ("acme", "1", "core", "2", "web", "4")

    def test_jobs_are_hashable(self, acme_organization):
        jobs = acme_organization.fetch_jobs()

        assert len(set(jobs)) == 2
        assert isinstance(jobs[0], FetchJob)


class TestStatSample:
    def test_equality(self):
        assert StatSample(timestamp=100, value=5.0) == StatSample(timestamp=100, value=5.0)
