"""
Job repository for Nexus Match.

Job postings are written only through compare-and-swap on their revision
counter, so two writers racing on the same posting cannot both succeed.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from nexus_match.core.exceptions import ConflictError, NotFoundError
from nexus_match.data.models.base import utc_now
from nexus_match.data.models.job import JobPosting
from nexus_match.utils.config import get_settings
from nexus_match.utils.constants import JobStatus
from nexus_match.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class JobRepository(ABC):
    """Storage contract for job postings."""

    @abstractmethod
    def add(self, job: JobPosting) -> JobPosting:
        """Store a new posting and return it with its id assigned."""

    @abstractmethod
    def get(self, job_id: str | ObjectId) -> Optional[JobPosting]:
        """Get a posting by id, or None."""

    @abstractmethod
    def update_if_revision(
        self, job_id: str | ObjectId, expected_revision: int, changes: dict[str, Any]
    ) -> JobPosting:
        """
        Apply changes only if the stored revision equals expected_revision.

        On success the revision is incremented and modified_at refreshed.

        Raises:
            NotFoundError: No posting with this id
            ConflictError: The stored revision differs
        """

    @abstractmethod
    def list_by_status(self, statuses: Iterable[JobStatus]) -> list[JobPosting]:
        """Postings whose stored status is one of statuses."""

    @abstractmethod
    def list_by_company(self, company_id: str) -> list[JobPosting]:
        """All postings of a company, including archived ones."""


class InMemoryJobRepository(JobRepository):
    """Process-local job store used for tests and demos."""

    def __init__(self) -> None:
        self._jobs: dict[str, JobPosting] = {}
        self._lock = threading.Lock()

    def add(self, job: JobPosting) -> JobPosting:
        stored = job.model_copy(update={"id": job.id or ObjectId()}, deep=True)
        with self._lock:
            self._jobs[str(stored.id)] = stored
        logger.debug(f"Created jobs document: {stored.id}")
        return stored.model_copy(deep=True)

    def get(self, job_id: str | ObjectId) -> Optional[JobPosting]:
        with self._lock:
            job = self._jobs.get(str(job_id))
        return job.model_copy(deep=True) if job is not None else None

    def update_if_revision(
        self, job_id: str | ObjectId, expected_revision: int, changes: dict[str, Any]
    ) -> JobPosting:
        with self._lock:
            current = self._jobs.get(str(job_id))
            if current is None:
                raise NotFoundError("Job", job_id)
            if current.revision != expected_revision:
                raise ConflictError(job_id, expected_revision, current.revision)
            updated = current.model_copy(
                update={**changes, "revision": current.revision + 1, "modified_at": utc_now()},
                deep=True,
            )
            self._jobs[str(job_id)] = updated
        return updated.model_copy(deep=True)

    def list_by_status(self, statuses: Iterable[JobStatus]) -> list[JobPosting]:
        wanted = {JobStatus(s).value for s in statuses}
        with self._lock:
            jobs = [j for j in self._jobs.values() if JobStatus(j.status).value in wanted]
        return [j.model_copy(deep=True) for j in _newest_first(jobs)]

    def list_by_company(self, company_id: str) -> list[JobPosting]:
        with self._lock:
            jobs = [j for j in self._jobs.values() if j.company_id == company_id]
        return [j.model_copy(deep=True) for j in _newest_first(jobs)]


def _newest_first(jobs: list[JobPosting]) -> list[JobPosting]:
    return sorted(jobs, key=lambda j: (j.created_at, str(j.id)), reverse=True)


class MongoJobRepository(BaseRepository[JobPosting], JobRepository):
    """Repository for job posting document operations."""

    @property
    def collection_name(self) -> str:
        return "jobs"

    @property
    def model_class(self) -> type[JobPosting]:
        return JobPosting

    def add(self, job: JobPosting) -> JobPosting:
        return self.insert(job)

    def get(self, job_id: str | ObjectId) -> Optional[JobPosting]:
        return self.get_by_id(job_id)

    def update_if_revision(
        self, job_id: str | ObjectId, expected_revision: int, changes: dict[str, Any]
    ) -> JobPosting:
        object_id = self._to_object_id(job_id)
        if object_id is None:
            raise NotFoundError("Job", job_id)

        document = self._get_collection().find_one_and_update(
            {"_id": object_id, "revision": expected_revision},
            {
                "$set": {**_to_mongo_values(changes), "modified_at": utc_now()},
                "$inc": {"revision": 1},
            },
            return_document=ReturnDocument.AFTER,
        )
        if document is not None:
            return self._to_model(document)

        # Filter missed: either the job is gone or another writer got there first
        current = self._get_collection().find_one({"_id": object_id}, {"revision": 1})
        if current is None:
            raise NotFoundError("Job", job_id)
        raise ConflictError(job_id, expected_revision, current.get("revision"))

    def list_by_status(self, statuses: Iterable[JobStatus]) -> list[JobPosting]:
        return self.find({"status": {"$in": [JobStatus(s).value for s in statuses]}})

    def list_by_company(self, company_id: str) -> list[JobPosting]:
        return self.find({"company_id": company_id})


def _to_mongo_values(changes: dict[str, Any]) -> dict[str, Any]:
    return {key: value.value if isinstance(value, JobStatus) else value for key, value in changes.items()}


# Singleton instance
_job_repository: Optional[JobRepository] = None


def get_job_repository() -> JobRepository:
    """Get the job repository singleton for the configured backend."""
    global _job_repository
    if _job_repository is None:
        if get_settings().database.backend == "memory":
            _job_repository = InMemoryJobRepository()
        else:
            _job_repository = MongoJobRepository()
    return _job_repository
