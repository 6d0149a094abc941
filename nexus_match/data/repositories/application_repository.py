"""
Application repository for Nexus Match.

Applications reference job postings by id. Nothing in this module deletes
them: archiving a posting keeps every application it received.
"""

import threading
from abc import ABC, abstractmethod
from typing import Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from nexus_match.core.exceptions import ValidationError
from nexus_match.data.models.application import Application
from nexus_match.utils.config import get_settings
from nexus_match.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


def _duplicate_application(application: Application) -> ValidationError:
    return ValidationError.for_field(
        "professional_id",
        f"Professional {application.professional_id} already applied to job {application.job_id}",
    )


class ApplicationRepository(ABC):
    """Storage contract for applications."""

    @abstractmethod
    def add(self, application: Application) -> Application:
        """
        Store a new application.

        Raises:
            ValidationError: The professional already applied to this job
        """

    @abstractmethod
    def get(self, application_id: str) -> Optional[Application]:
        """Get an application by id, whatever the state of its job."""

    @abstractmethod
    def list_for_job(self, job_id: str) -> list[Application]:
        """Applications received by a job, newest first."""

    @abstractmethod
    def list_for_professional(self, professional_id: str) -> list[Application]:
        """Applications submitted by a professional, newest first."""

    @abstractmethod
    def count_for_job(self, job_id: str) -> int:
        """Number of applications received by a job."""


class InMemoryApplicationRepository(ApplicationRepository):
    """Process-local application store used for tests and demos."""

    def __init__(self) -> None:
        self._applications: list[Application] = []
        self._lock = threading.Lock()

    def add(self, application: Application) -> Application:
        with self._lock:
            if any(
                a.job_id == application.job_id and a.professional_id == application.professional_id
                for a in self._applications
            ):
                raise _duplicate_application(application)
            stored = application.model_copy(update={"id": application.id or ObjectId()})
            self._applications.append(stored)
        return stored.model_copy()

    def get(self, application_id: str) -> Optional[Application]:
        with self._lock:
            for application in self._applications:
                if str(application.id) == str(application_id):
                    return application.model_copy()
        return None

    def list_for_job(self, job_id: str) -> list[Application]:
        with self._lock:
            found = [a for a in self._applications if a.job_id == str(job_id)]
        return [a.model_copy() for a in reversed(found)]

    def list_for_professional(self, professional_id: str) -> list[Application]:
        with self._lock:
            found = [a for a in self._applications if a.professional_id == professional_id]
        return [a.model_copy() for a in reversed(found)]

    def count_for_job(self, job_id: str) -> int:
        with self._lock:
            return sum(1 for a in self._applications if a.job_id == str(job_id))


class MongoApplicationRepository(BaseRepository[Application], ApplicationRepository):
    """Repository for application document operations."""

    @property
    def collection_name(self) -> str:
        return "applications"

    @property
    def model_class(self) -> type[Application]:
        return Application

    def add(self, application: Application) -> Application:
        try:
            return self.insert(application)
        except DuplicateKeyError as e:
            raise _duplicate_application(application) from e

    def get(self, application_id: str) -> Optional[Application]:
        return self.get_by_id(application_id)

    def list_for_job(self, job_id: str) -> list[Application]:
        return self.find({"job_id": str(job_id)})

    def list_for_professional(self, professional_id: str) -> list[Application]:
        return self.find({"professional_id": professional_id})

    def count_for_job(self, job_id: str) -> int:
        return self.count({"job_id": str(job_id)})


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton for the configured backend."""
    global _application_repository
    if _application_repository is None:
        if get_settings().database.backend == "memory":
            _application_repository = InMemoryApplicationRepository()
        else:
            _application_repository = MongoApplicationRepository()
    return _application_repository
