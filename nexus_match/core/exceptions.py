"""
Error taxonomy for the matching and job lifecycle core.

Every failure surfaces either as one of these typed errors or as an
explicit degraded match response; none are retried by the core.
"""

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError


class NexusMatchError(Exception):
    """Base class for all core errors."""

    pass


class ValidationError(NexusMatchError, ValueError):
    """
    Caller-supplied input was rejected before any computation ran.

    Attributes:
        errors: Field-level detail, one {"field", "message"} dict per problem
    """

    def __init__(self, message: str, errors: Optional[list[dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(f"{field}: {message}", [{"field": field, "message": message}])

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Convert a pydantic ValidationError into field-level detail."""
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "__root__",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        return cls(f"Invalid input - {summary}", errors)


class NotFoundError(NexusMatchError, LookupError):
    """Unknown job, application or professional id."""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(f"{resource_type} not found: {resource_id}")
        self.resource_type = resource_type
        self.resource_id = resource_id


class IllegalTransitionError(NexusMatchError):
    """Requested job status change is not in the transition table."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot transition job from '{current}' to '{target}'")
        self.current = current
        self.target = target


class ConflictError(NexusMatchError):
    """A concurrent writer updated the job first; re-fetch and retry."""

    def __init__(self, job_id: Any, expected_revision: int, actual_revision: Optional[int] = None):
        message = f"Job {job_id} was modified concurrently (expected revision {expected_revision}"
        if actual_revision is not None:
            message += f", found {actual_revision}"
        super().__init__(message + ")")
        self.job_id = job_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision


class OwnershipError(NexusMatchError):
    """A company tried to mutate a job posting it does not own."""

    def __init__(self, job_id: Any, company_id: Any):
        super().__init__(f"Company {company_id} does not own job {job_id}")
        self.job_id = job_id
        self.company_id = company_id


class MatchCancelledError(NexusMatchError):
    """A scoring pass was cancelled because its session moved on or closed."""

    pass
