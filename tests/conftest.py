"""
Shared test fixtures for the Nexus Match test suite.

Sets environment variables before any nexus_match imports so settings pick
the in-memory backend, then provides factory fixtures for candidates,
requirements and job content plus wired-up engine and lifecycle fixtures.
"""

import os

# === Set environment BEFORE any nexus_match imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_BACKEND", "memory")
os.environ.setdefault("DB_NAME", "nexus_match_test")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")

from datetime import timedelta
from typing import Any, Optional

import pytest

from nexus_match.core.jobs import JobLifecycle
from nexus_match.core.matching import (
    CandidateSnapshotProvider,
    MatchingEngine,
    ScoringEngine,
)
from nexus_match.data.models import Candidate, JobCreate, Requirement, utc_now
from nexus_match.data.repositories import (
    InMemoryApplicationRepository,
    InMemoryCandidateDirectory,
    InMemoryJobRepository,
)
from nexus_match.utils.config import MatchingSettings, SessionSettings


# ---------------------------------------------------------------------------
# Factory fixtures for matching inputs
# ---------------------------------------------------------------------------


@pytest.fixture
def make_candidate():
    """Factory that returns a callable to build Candidate models."""

    def _factory(
        professional_id: str = "pro-1",
        sectors: Any = ("technology",),
        languages: Any = ("english",),
        formats: Any = ("online",),
        experience_level: str = "senior",
        rate_per_hour: Optional[float] = 100.0,
        rating: Optional[float] = 4.5,
        name: str = "",
        title: str = "",
    ) -> Candidate:
        return Candidate(
            professional_id=professional_id,
            sectors=sectors,
            languages=languages,
            formats=formats,
            experience_level=experience_level,
            rate_per_hour=rate_per_hour,
            rating=rating,
            name=name or f"Trainer {professional_id}",
            title=title,
        )

    return _factory


@pytest.fixture
def make_requirement():
    """Factory that returns a callable to build Requirement models."""

    def _factory(**overrides: Any) -> Requirement:
        fields: dict[str, Any] = {
            "sector": "technology",
            "training_type": "Leadership",
        }
        fields.update(overrides)
        return Requirement(**fields)

    return _factory


@pytest.fixture
def example_requirement() -> Requirement:
    """Technology / Leadership requirement used in the reference scenario."""
    return Requirement.model_validate(
        {
            "sector": "Technology",
            "trainingType": "Leadership",
            "preferredLanguage": "ENGLISH",
            "format": "ONLINE",
            "experienceLevel": "intermediate",
            "budgetPerHour": 150,
        }
    )


@pytest.fixture
def candidate_a(make_candidate) -> Candidate:
    return make_candidate(
        professional_id="A",
        sectors=["Technology"],
        languages=["ENGLISH"],
        formats=["ONLINE"],
        experience_level="senior",
        rate_per_hour=140,
        rating=4.8,
    )


@pytest.fixture
def candidate_b(make_candidate) -> Candidate:
    return make_candidate(
        professional_id="B",
        sectors=["Technology"],
        languages=["ARABIC"],
        formats=["IN_PERSON"],
        experience_level="junior",
        rate_per_hour=200,
        rating=4.2,
    )


@pytest.fixture
def make_job_content():
    """Factory that returns a callable to build JobCreate schemas."""

    def _factory(**overrides: Any) -> JobCreate:
        fields: dict[str, Any] = {
            "title": "Leadership Workshop Facilitator",
            "description": "Two-day leadership programme for engineering managers.",
            "location": "Dubai",
            "job_type": "contract",
            "requirements": "5+ years facilitating leadership programmes",
            "min_compensation": 120.0,
            "max_compensation": 180.0,
            "compensation_unit": "hourly",
            "remote": False,
            "featured": True,
        }
        fields.update(overrides)
        return JobCreate(**fields)

    return _factory


# ---------------------------------------------------------------------------
# Stores and services
# ---------------------------------------------------------------------------


@pytest.fixture
def job_repository() -> InMemoryJobRepository:
    return InMemoryJobRepository()


@pytest.fixture
def application_repository() -> InMemoryApplicationRepository:
    return InMemoryApplicationRepository()


@pytest.fixture
def lifecycle(job_repository, application_repository) -> JobLifecycle:
    return JobLifecycle(job_repository, application_repository)


@pytest.fixture
def candidate_directory(candidate_a, candidate_b) -> InMemoryCandidateDirectory:
    return InMemoryCandidateDirectory([candidate_a, candidate_b])


@pytest.fixture
def snapshot_provider(candidate_directory) -> CandidateSnapshotProvider:
    return CandidateSnapshotProvider(candidate_directory, refresh_interval_seconds=60)


@pytest.fixture
def matching_settings() -> MatchingSettings:
    # Generous budget so slow CI machines do not time out ordinary passes
    return MatchingSettings(pass_timeout_ms=5000, max_workers=2, chunk_size=2)


@pytest.fixture
def session_settings() -> SessionSettings:
    return SessionSettings(poll_interval_seconds=0.05, max_idle_polls=3)


@pytest.fixture
def scoring_engine() -> ScoringEngine:
    return ScoringEngine()


@pytest.fixture
def matching_engine(snapshot_provider, job_repository, matching_settings):
    engine = MatchingEngine(
        snapshot_provider=snapshot_provider,
        job_repository=job_repository,
        settings=matching_settings,
    )
    yield engine
    engine.close()


@pytest.fixture
def open_job(lifecycle, make_job_content, example_requirement):
    """An open job whose embedded requirement is the reference requirement."""
    return lifecycle.create(
        "company-1",
        make_job_content(training_requirement=example_requirement),
        initial_status="open",
    )


@pytest.fixture
def past() -> Any:
    return utc_now() - timedelta(days=1)
