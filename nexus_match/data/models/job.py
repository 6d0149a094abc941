"""
Job posting data models for Nexus Match.

Defines the schema for job postings, their lifecycle fields, and the
report returned when a posting is archived.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nexus_match.utils.constants import JobStatus

from .base import BaseDocument, ensure_utc, utc_now
from .requirement import Requirement

TITLE_MAX_LENGTH = 200

# Statuses that lapse to EXPIRED once expires_at has passed
EXPIRABLE_STATUSES = frozenset({JobStatus.OPEN, JobStatus.PAUSED})


class JobCreate(BaseModel):
    """Schema for the content of a new job posting."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = ""
    location: Optional[str] = None
    job_type: Optional[str] = None  # e.g. "contract", "part_time"
    requirements: Optional[str] = None
    min_compensation: Optional[float] = Field(default=None, ge=0)
    max_compensation: Optional[float] = Field(default=None, ge=0)
    compensation_unit: Optional[str] = None  # hourly, daily, project
    remote: bool = False
    featured: bool = False
    training_requirement: Optional[Requirement] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_compensation_range(self) -> "JobCreate":
        """Minimum compensation may not exceed the maximum."""
        if (
            self.min_compensation is not None
            and self.max_compensation is not None
            and self.min_compensation > self.max_compensation
        ):
            raise ValueError("min_compensation must not exceed max_compensation")
        return self


# Fields copied verbatim when a posting is duplicated
JOB_CONTENT_FIELDS: frozenset[str] = frozenset(JobCreate.model_fields) - {"featured", "expires_at"}


class JobPosting(BaseDocument):
    """
    Main job posting model.

    status holds the stored status; callers that need the status as seen
    by listings and matching use effective_status(), which accounts for
    expiry without any background sweep.
    """

    # Ownership (immutable after creation)
    company_id: str = Field(..., min_length=1)

    # Content
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = ""
    location: Optional[str] = None
    job_type: Optional[str] = None
    requirements: Optional[str] = None
    min_compensation: Optional[float] = Field(default=None, ge=0)
    max_compensation: Optional[float] = Field(default=None, ge=0)
    compensation_unit: Optional[str] = None
    remote: bool = False
    featured: bool = False

    # Embedded requirement used for reverse matching
    training_requirement: Optional[Requirement] = None

    # Lifecycle
    status: JobStatus = JobStatus.DRAFT
    expires_at: Optional[datetime] = None
    application_count: int = Field(default=0, ge=0)
    revision: int = Field(default=0, ge=0)

    @field_validator("created_at", "modified_at", "expires_at")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def job_id(self) -> str:
        return str(self.id) if self.id is not None else ""

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether an expirable posting has passed its expiry time."""
        if self.expires_at is None or JobStatus(self.status) not in EXPIRABLE_STATUSES:
            return False
        return self.expires_at <= (now or utc_now())

    def effective_status(self, now: Optional[datetime] = None) -> JobStatus:
        """Stored status, or EXPIRED for an open/paused posting past expires_at."""
        if self.is_expired(now):
            return JobStatus.EXPIRED
        return JobStatus(self.status)

    def is_live(self, now: Optional[datetime] = None) -> bool:
        """Only effectively open postings are shown in listings and matching."""
        return self.effective_status(now) == JobStatus.OPEN

    def content(self) -> dict[str, Any]:
        """Content fields copied by duplicate()."""
        return self.model_dump(include=set(JOB_CONTENT_FIELDS))

    def model_dump_mongo(self) -> dict[str, Any]:
        data = super().model_dump_mongo()
        if self.training_requirement is not None:
            data["training_requirement"] = self.training_requirement.model_dump(
                mode="json", by_alias=True, exclude_none=True
            )
        return data

    class Settings:
        """MongoDB collection settings."""

        name = "jobs"
        indexes = [
            "status",
            "company_id",
            "expires_at",
            "created_at",
        ]


class DeletionReport(BaseModel):
    """Outcome of archiving a job posting."""

    model_config = ConfigDict(frozen=True)

    job: JobPosting
    had_applications: bool
    application_count: int = Field(..., ge=0)
