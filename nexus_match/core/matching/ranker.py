"""
Deterministic ordering and truncation of match results.
"""

from typing import Any, Iterable, Optional

from nexus_match.core.exceptions import ValidationError
from nexus_match.data.models import JobMatch, MatchResult
from nexus_match.utils.constants import LISTING_K, PREVIEW_K


def validate_k(k: Any) -> int:
    """Return k if it is a positive integer, else raise ValidationError."""
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValidationError.for_field("k", f"must be a positive integer, got {k!r}")
    return k


class Ranker:
    """
    Orders scored candidates and keeps the top k.

    Sort key: score descending, then rating descending (candidates without
    a rating after every rated one), then professional_id ascending.
    """

    def __init__(self, preview_k: int = PREVIEW_K, listing_k: int = LISTING_K):
        self.preview_k = validate_k(preview_k)
        self.listing_k = validate_k(listing_k)

    @staticmethod
    def sort_key(result: MatchResult) -> tuple:
        has_rating = result.rating is not None
        return (-result.score, not has_rating, -(result.rating or 0.0), result.professional_id)

    def top(self, results: Iterable[MatchResult], k: Optional[int] = None) -> list[MatchResult]:
        """
        Rank results and truncate to k.

        Args:
            results: Scored, unranked results
            k: Number of results to keep (preview_k if omitted)

        Returns:
            At most k results with 1-based ranks assigned

        Raises:
            ValidationError: If k is not a positive integer
        """
        k = self.preview_k if k is None else validate_k(k)
        ordered = sorted(results, key=self.sort_key)[:k]
        return [r.model_copy(update={"rank": i}) for i, r in enumerate(ordered, start=1)]

    def top_jobs(self, matches: Iterable[JobMatch], k: Optional[int] = None) -> list[JobMatch]:
        """Rank reverse matches by score descending, then job id."""
        k = self.listing_k if k is None else validate_k(k)
        ordered = sorted(matches, key=lambda m: (-m.score, m.job_id))[:k]
        return [m.model_copy(update={"rank": i}) for i, m in enumerate(ordered, start=1)]
