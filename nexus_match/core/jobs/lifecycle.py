"""
Job posting lifecycle state machine.

Every status change goes through the transition table and a
compare-and-swap on the posting's revision. Expiry is evaluated when a
posting is read: an open or paused posting past expires_at behaves as
expired without any background sweep.
"""

from typing import Any, Optional

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from nexus_match.core.exceptions import (
    IllegalTransitionError,
    NotFoundError,
    OwnershipError,
    ValidationError,
)
from nexus_match.data.models import DeletionReport, JobCreate, JobPosting, utc_now
from nexus_match.data.models.job import TITLE_MAX_LENGTH
from nexus_match.data.repositories import (
    ApplicationRepository,
    JobRepository,
    get_application_repository,
    get_job_repository,
)
from nexus_match.utils.constants import DUPLICATE_TITLE_SUFFIX, AuditAction, JobStatus
from nexus_match.utils.logger import LoggerMixin, audit_log

# Allowed status changes, keyed by effective source status
TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.DRAFT: frozenset({JobStatus.OPEN}),
    JobStatus.OPEN: frozenset({JobStatus.PAUSED, JobStatus.CLOSED, JobStatus.FILLED, JobStatus.DELETED}),
    JobStatus.PAUSED: frozenset({JobStatus.OPEN, JobStatus.CLOSED, JobStatus.DELETED}),
    JobStatus.CLOSED: frozenset({JobStatus.OPEN, JobStatus.DELETED}),
    JobStatus.FILLED: frozenset({JobStatus.DELETED}),
    JobStatus.EXPIRED: frozenset({JobStatus.OPEN, JobStatus.DELETED}),
    JobStatus.DELETED: frozenset(),
}

INITIAL_STATUSES: frozenset[JobStatus] = frozenset({JobStatus.DRAFT, JobStatus.OPEN})


def can_transition(current: JobStatus | str, target: JobStatus | str) -> bool:
    """Whether the table allows current -> target."""
    return JobStatus(target) in TRANSITIONS[JobStatus(current)]


def _parse_status(value: JobStatus | str, field: str = "status") -> JobStatus:
    try:
        return JobStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in JobStatus)
        raise ValidationError.for_field(field, f"unknown status {value!r} (expected one of: {allowed})")


class JobLifecycle(LoggerMixin):
    """
    Owner-scoped operations on job postings.

    company_id arguments are optional so trusted internal callers can skip
    the ownership check; when given, the posting must belong to that company.
    """

    def __init__(
        self,
        job_repository: Optional[JobRepository] = None,
        application_repository: Optional[ApplicationRepository] = None,
    ):
        self.jobs = job_repository or get_job_repository()
        self.applications = application_repository or get_application_repository()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, job_id: str | ObjectId) -> JobPosting:
        """
        Get a posting with its effective status and application count.

        Raises:
            NotFoundError: Unknown job id
        """
        return self._with_derived(self._load(job_id))

    def list_open_jobs(self) -> list[JobPosting]:
        """Live postings only: open and not past their expiry."""
        now = utc_now()
        return [
            self._with_derived(job)
            for job in self.jobs.list_by_status([JobStatus.OPEN])
            if job.is_live(now)
        ]

    def list_company_jobs(self, company_id: str, include_deleted: bool = False) -> list[JobPosting]:
        jobs = [self._with_derived(job) for job in self.jobs.list_by_company(company_id)]
        if include_deleted:
            return jobs
        return [job for job in jobs if JobStatus(job.status) != JobStatus.DELETED]

    @staticmethod
    def is_live(job: JobPosting) -> bool:
        return job.is_live()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(
        self,
        company_id: str,
        content: JobCreate | dict[str, Any],
        initial_status: JobStatus | str = JobStatus.DRAFT,
    ) -> JobPosting:
        """
        Create a posting owned by company_id.

        Raises:
            ValidationError: Invalid content, or an initial status other than draft/open
        """
        status = _parse_status(initial_status, "initial_status")
        if status not in INITIAL_STATUSES:
            raise ValidationError.for_field(
                "initial_status", f"new jobs start as draft or open, not {status.value}"
            )

        try:
            if not isinstance(content, JobCreate):
                content = JobCreate.model_validate(content)
            job = JobPosting(
                company_id=company_id,
                status=status,
                **{name: getattr(content, name) for name in JobCreate.model_fields},
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        job = self.jobs.add(job)
        audit_log(
            AuditAction.JOB_CREATED,
            {"job_id": job.job_id, "company_id": company_id, "status": status.value},
        )
        self.logger.info(f"Created job {job.job_id} ({status.value}) for company {company_id}")
        return self._with_derived(job)

    def transition(
        self,
        job_id: str | ObjectId,
        target: JobStatus | str,
        expected_revision: int,
        company_id: Optional[str] = None,
    ) -> JobPosting:
        """
        Move a posting to a new status.

        The source status is the effective one, so an expired posting can
        only be reopened or deleted. Reopening an expired posting clears
        expires_at. On any error the stored posting is left unchanged.

        Raises:
            ValidationError: Unknown target status
            NotFoundError: Unknown job id
            OwnershipError: company_id does not own the posting
            ConflictError: expected_revision is stale
            IllegalTransitionError: The table does not allow the change
        """
        target = _parse_status(target)
        job = self._load(job_id)
        self._check_owner(job, company_id)

        current = job.effective_status()
        if target not in TRANSITIONS[current]:
            raise IllegalTransitionError(current.value, target.value)

        changes: dict[str, Any] = {"status": target.value}
        if current == JobStatus.EXPIRED and target == JobStatus.OPEN:
            changes["expires_at"] = None

        updated = self.jobs.update_if_revision(job.id, expected_revision, changes)
        audit_log(
            AuditAction.JOB_STATUS_CHANGED,
            {
                "job_id": updated.job_id,
                "company_id": updated.company_id,
                "from": current.value,
                "to": target.value,
                "revision": updated.revision,
            },
        )
        self.logger.info(f"Job {updated.job_id}: {current.value} -> {target.value}")
        return self._with_derived(updated)

    def delete(
        self,
        job_id: str | ObjectId,
        expected_revision: int,
        company_id: Optional[str] = None,
    ) -> DeletionReport:
        """
        Archive a posting. Its applications are kept.

        Raises:
            Same errors as transition()
        """
        job = self.transition(job_id, JobStatus.DELETED, expected_revision, company_id)
        count = self.applications.count_for_job(job.job_id)
        audit_log(
            AuditAction.JOB_DELETED,
            {"job_id": job.job_id, "company_id": job.company_id, "application_count": count},
        )
        return DeletionReport(job=job, had_applications=count > 0, application_count=count)

    def duplicate(self, job_id: str | ObjectId, company_id: Optional[str] = None) -> JobPosting:
        """
        Create an open copy of a posting.

        The copy gets a new id, fresh timestamps, revision 0 and no
        applications. Content is copied verbatim except the title, which is
        suffixed, and featured, which is reset. Expiry is not copied.

        Raises:
            NotFoundError: Unknown or deleted source posting
            OwnershipError: company_id does not own the source
        """
        source = self._load(job_id)
        if JobStatus(source.status) == JobStatus.DELETED:
            raise NotFoundError("Job", job_id)
        self._check_owner(source, company_id)

        title = _copy_title(source.title)
        copy = JobPosting(
            **{
                **source.content(),
                "title": title,
                "featured": False,
            },
            company_id=source.company_id,
            status=JobStatus.OPEN,
        )
        copy = self.jobs.add(copy)
        audit_log(
            AuditAction.JOB_DUPLICATED,
            {"source_job_id": source.job_id, "job_id": copy.job_id, "company_id": copy.company_id},
        )
        self.logger.info(f"Duplicated job {source.job_id} as {copy.job_id}")
        return self._with_derived(copy)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _load(self, job_id: str | ObjectId) -> JobPosting:
        job = self.jobs.get(job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    @staticmethod
    def _check_owner(job: JobPosting, company_id: Optional[str]) -> None:
        if company_id is not None and job.company_id != company_id:
            raise OwnershipError(job.job_id, company_id)

    def _with_derived(self, job: JobPosting) -> JobPosting:
        return job.model_copy(
            update={
                "status": job.effective_status().value,
                "application_count": self.applications.count_for_job(job.job_id),
            }
        )


def _copy_title(title: str) -> str:
    room = TITLE_MAX_LENGTH - len(DUPLICATE_TITLE_SUFFIX)
    return title[:room].rstrip() + DUPLICATE_TITLE_SUFFIX
