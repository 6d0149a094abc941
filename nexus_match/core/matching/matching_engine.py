"""
Requirement-to-candidate matching engine.

Runs scoring passes over one candidate snapshot version, fanning chunks
of candidates out to a thread pool under a hard wall-clock budget, then
ranks and explains the results. Also scores a candidate against the
training requirements of live job postings (reverse matching).
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from nexus_match.core.exceptions import MatchCancelledError, NotFoundError, ValidationError
from nexus_match.data.models import (
    Candidate,
    JobMatch,
    MatchFeedback,
    MatchResponse,
    MatchResult,
    Requirement,
    ScoreCard,
    parse_requirement,
)
from nexus_match.data.repositories import JobRepository, get_candidate_directory, get_job_repository
from nexus_match.utils.config import MatchingSettings, get_settings
from nexus_match.utils.constants import AuditAction, JobStatus, MatchStatus, MatchStrength
from nexus_match.utils.logger import LoggerMixin, audit_log

from .concurrency import CancellationToken
from .explanation import build_insights
from .ranker import Ranker, validate_k
from .scoring import ScoringEngine
from .snapshot import CandidateSnapshot, CandidateSnapshotProvider


class MatchingEngine(LoggerMixin):
    """
    Engine for scoring and ranking candidates against a requirement.

    Scoring is pure, so a pass needs no locks: every worker reads the same
    immutable snapshot and the shared cancellation token.
    """

    def __init__(
        self,
        snapshot_provider: Optional[CandidateSnapshotProvider] = None,
        scoring_engine: Optional[ScoringEngine] = None,
        ranker: Optional[Ranker] = None,
        job_repository: Optional[JobRepository] = None,
        settings: Optional[MatchingSettings] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Initialize the matching engine.

        Args:
            snapshot_provider: Candidate snapshots (configured directory if omitted)
            scoring_engine: Scorer (weights from settings if omitted)
            ranker: Result ordering (k defaults from settings if omitted)
            job_repository: Job store used for job-scoped matching
            settings: Matching settings (global settings if omitted)
            executor: Shared worker pool; one is created if omitted
        """
        self.settings = settings or get_settings().matching
        self.snapshots = snapshot_provider or CandidateSnapshotProvider(get_candidate_directory())
        self.scorer = scoring_engine or ScoringEngine(weights=self.settings.weights)
        self.ranker = ranker or Ranker(self.settings.preview_k, self.settings.listing_k)
        self._job_repository = job_repository
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.max_workers, thread_name_prefix="match-worker"
        )
        self._closed = threading.Event()

    @property
    def jobs(self) -> JobRepository:
        if self._job_repository is None:
            self._job_repository = get_job_repository()
        return self._job_repository

    # -------------------------------------------------------------------------
    # Forward matching
    # -------------------------------------------------------------------------

    def match(
        self,
        requirement: Requirement | dict[str, Any],
        k: Optional[int] = None,
        job_id: Optional[str] = None,
        token: Optional[CancellationToken] = None,
    ) -> MatchResponse:
        """
        Score, rank and explain candidates for a requirement.

        Args:
            requirement: Requirement model or raw fields
            k: Number of results (preview_k if omitted)
            job_id: Optional job context; only live jobs are matched
            token: Cancellation token shared with the caller

        Returns:
            MatchResponse with status ok, timed_out, cancelled or job_not_live

        Raises:
            ValidationError: Invalid requirement, missing sector/training type, or bad k
            NotFoundError: job_id does not exist
        """
        requirement = parse_requirement(requirement)
        k = self.ranker.preview_k if k is None else validate_k(k)
        requirement.require_complete()
        fingerprint = requirement.fingerprint()

        if job_id is not None:
            job = self.jobs.get(job_id)
            if job is None:
                raise NotFoundError("Job", job_id)
            if not job.is_live():
                self.logger.info(
                    f"Job {job_id} is {job.effective_status().value}; match skipped"
                )
                return MatchResponse(status=MatchStatus.JOB_NOT_LIVE, fingerprint=fingerprint)

        token = token or CancellationToken()
        snapshot = self.snapshots.current()
        started = time.monotonic()

        try:
            results = self._score_snapshot(requirement, snapshot, token)
        except MatchCancelledError:
            self.logger.debug(f"Pass {fingerprint} cancelled ({token.reason})")
            return MatchResponse(
                status=MatchStatus.CANCELLED,
                fingerprint=fingerprint,
                snapshot_version=snapshot.version,
            )

        elapsed_ms = (time.monotonic() - started) * 1000
        if results is None:
            self.logger.warning(
                f"Pass {fingerprint} exceeded {self.settings.pass_timeout_ms}ms "
                f"over {len(snapshot)} candidates"
            )
            return MatchResponse(
                status=MatchStatus.TIMED_OUT,
                fingerprint=fingerprint,
                snapshot_version=snapshot.version,
                retry_after_seconds=self.settings.retry_after_seconds,
            )

        ranked = self.ranker.top(results, k)
        self.logger.debug(
            f"Pass {fingerprint}: {len(results)} scored, top {len(ranked)} "
            f"from snapshot v{snapshot.version} in {elapsed_ms:.1f}ms"
        )
        return MatchResponse(
            status=MatchStatus.OK,
            results=tuple(ranked),
            fingerprint=fingerprint,
            snapshot_version=snapshot.version,
            insights=build_insights(ranked),
        )

    def _score_snapshot(
        self,
        requirement: Requirement,
        snapshot: CandidateSnapshot,
        token: CancellationToken,
    ) -> Optional[list[MatchResult]]:
        """
        Score every candidate of one snapshot in parallel.

        Returns None when the pass runs past its time budget; the token is
        cancelled so outstanding workers stop at the next candidate.
        """
        token.raise_if_cancelled()
        if self._closed.is_set():
            raise MatchCancelledError("engine closed")

        timeout = self.settings.pass_timeout_ms / 1000
        futures: list[Future] = [
            self._executor.submit(self._score_chunk, requirement, chunk, token)
            for chunk in snapshot.chunks(self.settings.chunk_size)
        ]
        _, not_done = wait(futures, timeout=timeout)
        if not_done:
            token.cancel("timeout")
            for future in not_done:
                future.cancel()
            return None

        results: list[MatchResult] = []
        for future in futures:
            results.extend(future.result())
        return results

    def _score_chunk(
        self,
        requirement: Requirement,
        chunk: tuple[Candidate, ...],
        token: CancellationToken,
    ) -> list[MatchResult]:
        results = []
        for candidate in chunk:
            token.raise_if_cancelled()
            card = self.scorer.score(requirement, candidate)
            if card.score >= self.settings.min_score:
                results.append(self._to_result(card, candidate))
        return results

    @staticmethod
    def _to_result(card: ScoreCard, candidate: Candidate) -> MatchResult:
        return MatchResult(
            professional_id=card.professional_id,
            score=card.score,
            reasons=card.reasons,
            strength=MatchStrength.from_score(card.score),
            breakdown={feature: round(value, 4) for feature, value in card.breakdown.items()},
            name=candidate.name,
            title=candidate.title,
            rating=candidate.rating,
        )

    # -------------------------------------------------------------------------
    # Reverse matching
    # -------------------------------------------------------------------------

    def match_jobs_for_candidate(self, professional_id: str, k: Optional[int] = None) -> list[JobMatch]:
        """
        Score one professional against the training requirements of live jobs.

        Jobs without a complete embedded requirement are skipped.

        Raises:
            NotFoundError: The professional is not in the current snapshot
            ValidationError: k is not a positive integer
        """
        k = self.ranker.listing_k if k is None else validate_k(k)
        candidate = self.snapshots.current().get(professional_id)
        if candidate is None:
            raise NotFoundError("Professional", professional_id)

        matches = []
        for job in self.jobs.list_by_status([JobStatus.OPEN]):
            requirement = job.training_requirement
            if not job.is_live() or requirement is None or not requirement.is_complete:
                continue
            card = self.scorer.score(requirement, candidate)
            if card.score < self.settings.min_score:
                continue
            matches.append(
                JobMatch(
                    job_id=job.job_id,
                    title=job.title,
                    company_id=job.company_id,
                    score=card.score,
                    reasons=card.reasons,
                    strength=MatchStrength.from_score(card.score),
                )
            )
        return self.ranker.top_jobs(matches, k)

    # -------------------------------------------------------------------------
    # Feedback
    # -------------------------------------------------------------------------

    def record_feedback(self, feedback: MatchFeedback | dict[str, Any]) -> MatchFeedback:
        """
        Record a company's booking feedback on a recommended professional.

        Feedback is written to the audit log; it does not change scoring.
        """
        if not isinstance(feedback, MatchFeedback):
            try:
                feedback = MatchFeedback.model_validate(feedback)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e) from e

        audit_log(AuditAction.MATCH_FEEDBACK, feedback.model_dump())
        self.logger.info(
            f"Feedback from {feedback.company_id} on {feedback.professional_id}: "
            f"{'booked' if feedback.booked else 'not booked'}"
        )
        return feedback

    def close(self) -> None:
        """Refuse new passes and release the worker pool if this engine owns it."""
        self._closed.set()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)


# Singleton instance
_matching_engine: Optional[MatchingEngine] = None


def get_matching_engine() -> MatchingEngine:
    """Get the matching engine singleton instance."""
    global _matching_engine
    if _matching_engine is None:
        _matching_engine = MatchingEngine()
    return _matching_engine
