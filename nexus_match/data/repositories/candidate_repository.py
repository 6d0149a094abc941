"""
Candidate directory for Nexus Match.

The matching core reads professional profiles from a directory; profile
editing belongs to other services.
"""

import threading
from typing import Iterable, Optional, Protocol, runtime_checkable

from pymongo import ASCENDING

from nexus_match.data.models.candidate import Candidate
from nexus_match.utils.config import get_settings
from nexus_match.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


@runtime_checkable
class CandidateDirectory(Protocol):
    """Source of candidate profiles for snapshot refreshes."""

    def list_candidates(self) -> list[Candidate]:
        ...

    def get_candidate(self, professional_id: str) -> Optional[Candidate]:
        ...


class InMemoryCandidateDirectory:
    """Static, process-local candidate list."""

    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        self._candidates: dict[str, Candidate] = {}
        self._lock = threading.Lock()
        for candidate in candidates:
            self.upsert(candidate)

    def upsert(self, candidate: Candidate) -> None:
        with self._lock:
            self._candidates[candidate.professional_id] = candidate

    def remove(self, professional_id: str) -> None:
        with self._lock:
            self._candidates.pop(professional_id, None)

    def replace_all(self, candidates: Iterable[Candidate]) -> None:
        """Swap the whole directory for a new set of profiles."""
        replacement = {c.professional_id: c for c in candidates}
        with self._lock:
            self._candidates = replacement

    def list_candidates(self) -> list[Candidate]:
        with self._lock:
            return [self._candidates[k] for k in sorted(self._candidates)]

    def get_candidate(self, professional_id: str) -> Optional[Candidate]:
        with self._lock:
            return self._candidates.get(professional_id)


class MongoCandidateDirectory(BaseRepository[Candidate]):
    """Candidate profiles read from the professionals collection."""

    @property
    def collection_name(self) -> str:
        return "professionals"

    @property
    def model_class(self) -> type[Candidate]:
        return Candidate

    def list_candidates(self) -> list[Candidate]:
        candidates = self.find({}, sort_by="professional_id", sort_order=ASCENDING)
        logger.debug(f"Loaded {len(candidates)} professionals")
        return candidates

    def get_candidate(self, professional_id: str) -> Optional[Candidate]:
        return self.find_one({"professional_id": professional_id})

    def upsert(self, candidate: Candidate) -> None:
        """Insert or replace a profile (used for seeding)."""
        self._get_collection().replace_one(
            {"professional_id": candidate.professional_id},
            self._to_document(candidate),
            upsert=True,
        )


# Singleton instance
_candidate_directory: Optional[CandidateDirectory] = None


def get_candidate_directory() -> CandidateDirectory:
    """Get the candidate directory singleton for the configured backend."""
    global _candidate_directory
    if _candidate_directory is None:
        if get_settings().database.backend == "memory":
            _candidate_directory = InMemoryCandidateDirectory()
        else:
            _candidate_directory = MongoCandidateDirectory()
    return _candidate_directory
