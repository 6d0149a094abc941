"""
Application data model for Nexus Match.

An application references a job posting; it is never owned by it, so
archiving the posting leaves its applications in place.
"""

from typing import Optional

from pydantic import Field

from nexus_match.utils.constants import ApplicationStatus

from .base import BaseDocument


class Application(BaseDocument):
    """A professional's application to a job posting."""

    job_id: str = Field(..., min_length=1)
    professional_id: str = Field(..., min_length=1)
    cover_letter: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING

    class Settings:
        """MongoDB collection settings."""

        name = "applications"
        indexes = [
            "job_id",
            "professional_id",
            "status",
        ]
