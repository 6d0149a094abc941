"""
Real-time match sessions.

A MatchSession holds the requirement a company is editing. It starts a
new pass only when the requirement fingerprint changes, keeps at most one
pass in flight, and re-polls on an interval to pick up candidate updates
until the session has been idle for too long.
"""

import threading
from typing import Any, Optional

from nexus_match.core.exceptions import MatchCancelledError
from nexus_match.data.models import MatchResponse, Requirement, parse_requirement
from nexus_match.utils.config import SessionSettings, get_settings
from nexus_match.utils.constants import MatchStatus
from nexus_match.utils.logger import LoggerMixin

from .concurrency import CancellationToken, PollScheduler
from .matching_engine import MatchingEngine


class MatchSession(LoggerMixin):
    """
    Single-flight, polled matching for one requirement being edited.

    Published responses carry a revision that only advances when the
    ranked output changes, so callers can skip re-rendering.
    """

    def __init__(
        self,
        engine: MatchingEngine,
        k: Optional[int] = None,
        job_id: Optional[str] = None,
        settings: Optional[SessionSettings] = None,
        auto_poll: bool = True,
    ):
        """
        Args:
            engine: Engine that runs the scoring passes
            k: Result size (the engine's preview size if omitted)
            job_id: Optional job context passed to every pass
            settings: Poll interval and idle limit (global settings if omitted)
            auto_poll: Start the background poll scheduler on the first update
        """
        self.engine = engine
        self.k = k
        self.job_id = job_id
        self.settings = settings or get_settings().session
        self.auto_poll = auto_poll

        self._state = threading.Condition()
        self._requirement: Optional[Requirement] = None
        self._fingerprint: Optional[str] = None
        self._token: Optional[CancellationToken] = None
        self._generation = 0
        self._latest: Optional[MatchResponse] = None
        self._revision = 0
        self._idle_polls = 0
        self._paused = False
        self._closed = False

        self._scheduler = PollScheduler(
            self.settings.poll_interval_seconds, self.poll, name="match-session-poll"
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def fingerprint(self) -> Optional[str]:
        with self._state:
            return self._fingerprint

    @property
    def revision(self) -> int:
        with self._state:
            return self._revision

    @property
    def idle_polls(self) -> int:
        with self._state:
            return self._idle_polls

    @property
    def is_paused(self) -> bool:
        with self._state:
            return self._paused

    @property
    def is_closed(self) -> bool:
        with self._state:
            return self._closed

    @property
    def is_polling(self) -> bool:
        return self._scheduler.is_running

    def latest(self) -> Optional[MatchResponse]:
        """Most recently published response, or None before the first pass."""
        with self._state:
            return self._latest

    def wait(self, after_revision: int = 0, timeout: Optional[float] = None) -> Optional[MatchResponse]:
        """Block until a response newer than after_revision is published or the session closes."""
        with self._state:
            self._state.wait_for(
                lambda: self._closed
                or (self._latest is not None and self._latest.revision > after_revision),
                timeout,
            )
            return self._latest

    # -------------------------------------------------------------------------
    # Updates and polling
    # -------------------------------------------------------------------------

    def update(self, requirement: Requirement | dict[str, Any]) -> Optional[MatchResponse]:
        """
        Submit the latest state of the requirement.

        A changed fingerprint cancels any in-flight pass, resets the idle
        counter, resumes paused polling, and runs a new pass. An unchanged
        fingerprint only stores the requirement for the next poll.

        Raises:
            ValidationError: The requirement has invalid field values
            MatchCancelledError: The session was closed
        """
        requirement = parse_requirement(requirement)
        fingerprint = requirement.fingerprint()

        with self._state:
            if self._closed:
                raise MatchCancelledError("session closed")
            self._requirement = requirement
            changed = fingerprint != self._fingerprint
            if not changed:
                return self._latest
            self._fingerprint = fingerprint
            self._idle_polls = 0
            self._paused = False
            # Starting under the lock orders this against a pausing poll's stop
            if self.auto_poll:
                self._scheduler.start()

        self.logger.debug(f"Requirement fingerprint changed to {fingerprint}")
        return self._run_pass(requirement)

    def poll(self) -> Optional[MatchResponse]:
        """
        Re-run the current requirement to pick up snapshot changes.

        Every poll counts as idle; after max_idle_polls the schedule pauses
        until the fingerprint changes. Skipped while a pass is in flight.
        """
        with self._state:
            if self._closed or self._paused or self._requirement is None or self._token is not None:
                return self._latest
            self._idle_polls += 1
            requirement = self._requirement
            pause = self._idle_polls >= self.settings.max_idle_polls
            if pause:
                self._paused = True

        try:
            return self._run_pass(requirement)
        finally:
            if pause:
                self._pause_scheduler()

    def close(self) -> None:
        """Abandon the session: stop polling and cancel in-flight work."""
        with self._state:
            if self._closed:
                return
            self._closed = True
            if self._token is not None:
                self._token.cancel("session closed")
            self._state.notify_all()
        self._scheduler.stop()

    def __enter__(self) -> "MatchSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _run_pass(self, requirement: Requirement) -> MatchResponse:
        with self._state:
            if self._token is not None:
                self._token.cancel("superseded")
            token = CancellationToken()
            self._token = token
            self._generation += 1
            generation = self._generation

        try:
            if requirement.is_complete:
                response = self.engine.match(requirement, self.k, job_id=self.job_id, token=token)
            else:
                response = MatchResponse(
                    status=MatchStatus.INCOMPLETE,
                    fingerprint=requirement.fingerprint(),
                    missing_fields=tuple(requirement.missing_required_fields),
                )
        except Exception:
            with self._state:
                if generation == self._generation:
                    self._token = None
            raise

        with self._state:
            if generation != self._generation or self._closed:
                return response
            self._token = None
            if response.status == MatchStatus.CANCELLED:
                return response
            return self._publish(response)

    def _pause_scheduler(self) -> None:
        with self._state:
            # A fingerprint change during the pass has already resumed polling
            if not self._paused or self._closed:
                return
            self.logger.debug(f"Session idle for {self.settings.max_idle_polls} polls; pausing")
            self._scheduler.stop(wait=False)

    def _publish(self, response: MatchResponse) -> MatchResponse:
        # Caller holds self._state
        if not response.same_output(self._latest):
            self._revision += 1
            self._state.notify_all()
        self._latest = response.model_copy(update={"revision": self._revision})
        return self._latest
