"""
Data access for Nexus Match.

Each store has an in-memory implementation and a MongoDB implementation;
the get_* accessors pick one according to DB_BACKEND.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .job_repository import (
    InMemoryJobRepository,
    JobRepository,
    MongoJobRepository,
    get_job_repository,
)
from .application_repository import (
    ApplicationRepository,
    InMemoryApplicationRepository,
    MongoApplicationRepository,
    get_application_repository,
)
from .candidate_repository import (
    CandidateDirectory,
    InMemoryCandidateDirectory,
    MongoCandidateDirectory,
    get_candidate_directory,
)

__all__ = [
    # Base
    "BaseRepository",
    # Job
    "JobRepository",
    "InMemoryJobRepository",
    "MongoJobRepository",
    "get_job_repository",
    # Application
    "ApplicationRepository",
    "InMemoryApplicationRepository",
    "MongoApplicationRepository",
    "get_application_repository",
    # Candidate
    "CandidateDirectory",
    "InMemoryCandidateDirectory",
    "MongoCandidateDirectory",
    "get_candidate_directory",
]
