"""
Versioned, immutable candidate snapshots.

A scoring pass reads exactly one snapshot from start to finish. The
provider swaps in a new snapshot on every refresh; passes already running
keep the version they started with.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from nexus_match.data.models import Candidate, utc_now
from nexus_match.data.repositories.candidate_repository import (
    CandidateDirectory,
    InMemoryCandidateDirectory,
)
from nexus_match.utils.config import get_settings
from nexus_match.utils.logger import get_logger

from .concurrency import PollScheduler

logger = get_logger(__name__)


@dataclass(frozen=True)
class CandidateSnapshot:
    """Read-only view of the candidate directory at one point in time."""

    version: int
    candidates: tuple[Candidate, ...] = ()
    taken_at: datetime = field(default_factory=utc_now)

    def __len__(self) -> int:
        return len(self.candidates)

    def get(self, professional_id: str) -> Optional[Candidate]:
        for candidate in self.candidates:
            if candidate.professional_id == professional_id:
                return candidate
        return None

    def chunks(self, size: int) -> list[tuple[Candidate, ...]]:
        """Split the candidates into consecutive slices of at most size."""
        return [self.candidates[i:i + size] for i in range(0, len(self.candidates), size)]


class CandidateSnapshotProvider:
    """
    Builds snapshots from a CandidateDirectory.

    The first call to current() loads the directory. After that a new
    version only appears on refresh(), either called directly or by the
    auto-refresh scheduler.
    """

    def __init__(
        self,
        directory: CandidateDirectory,
        refresh_interval_seconds: Optional[float] = None,
    ):
        self._directory = directory
        self._refresh_interval = (
            refresh_interval_seconds or get_settings().snapshot.refresh_interval_seconds
        )
        self._lock = threading.Lock()
        self._snapshot: Optional[CandidateSnapshot] = None
        self._scheduler: Optional[PollScheduler] = None

    @classmethod
    def from_candidates(cls, candidates: Iterable[Candidate]) -> "CandidateSnapshotProvider":
        """Provider over a fixed in-memory candidate list."""
        return cls(InMemoryCandidateDirectory(candidates))

    @property
    def directory(self) -> CandidateDirectory:
        return self._directory

    def current(self) -> CandidateSnapshot:
        """The latest snapshot, loading the directory on first use."""
        with self._lock:
            snapshot = self._snapshot
        if snapshot is None:
            snapshot = self.refresh()
        return snapshot

    def refresh(self) -> CandidateSnapshot:
        """Reload the directory and publish the next snapshot version."""
        candidates = tuple(
            sorted(self._directory.list_candidates(), key=lambda c: c.professional_id)
        )
        with self._lock:
            version = self._snapshot.version + 1 if self._snapshot is not None else 1
            self._snapshot = CandidateSnapshot(version=version, candidates=candidates)
            snapshot = self._snapshot
        logger.debug(f"Candidate snapshot v{version} loaded with {len(candidates)} candidates")
        return snapshot

    def start_auto_refresh(self) -> None:
        if self._scheduler is None:
            self._scheduler = PollScheduler(
                self._refresh_interval, self.refresh, name="snapshot-refresh"
            )
        self._scheduler.start()

    def stop_auto_refresh(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()
