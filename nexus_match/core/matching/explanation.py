"""
Human-readable explanations of match scores.

Reasons are derived only from scoring contributions and the inputs that
produced them, so the same pair always yields the same strings.
"""

from collections import Counter
from typing import Optional, Sequence

from nexus_match.data.models import (
    Candidate,
    FactorInsight,
    FeatureContribution,
    MatchInsights,
    MatchResult,
    Requirement,
)
from nexus_match.utils.constants import (
    MAX_REASONS,
    REASON_PRIORITY,
    REASON_THRESHOLD,
    MatchStrength,
    TrainingFormat,
    TrainingLanguage,
)


class ExplanationGenerator:
    """Turns feature contributions into at most max_reasons short strings."""

    def __init__(self, threshold: float = REASON_THRESHOLD, max_reasons: int = MAX_REASONS):
        self.threshold = threshold
        self.max_reasons = max_reasons

    def select(self, contributions: Sequence[FeatureContribution]) -> list[FeatureContribution]:
        """
        Pick the contributions worth explaining.

        Eligible contributions have a normalized value at or above the
        threshold. They are ordered by weighted contribution, largest first,
        with equal contributions in REASON_PRIORITY order.
        """
        eligible = [c for c in contributions if c.value >= self.threshold]
        eligible.sort(key=lambda c: (-round(c.weighted, 9), _priority(c.feature)))
        return eligible[: self.max_reasons]

    def reasons(
        self,
        contributions: Sequence[FeatureContribution],
        requirement: Requirement,
        candidate: Candidate,
    ) -> tuple[str, ...]:
        return tuple(
            self.describe(c, requirement, candidate) for c in self.select(contributions)
        )

    def describe(
        self,
        contribution: FeatureContribution,
        requirement: Requirement,
        candidate: Candidate,
    ) -> str:
        feature = contribution.feature
        full = contribution.value >= 1.0

        if feature == "sector":
            return f"Sector match: {requirement.sector.display_name} specialist"

        if feature == "budget":
            if full:
                return (
                    f"Within budget: {candidate.rate_per_hour:g}/hr "
                    f"vs {requirement.budget_per_hour:g}/hr"
                )
            return (
                f"Close to budget: {candidate.rate_per_hour:g}/hr "
                f"vs {requirement.budget_per_hour:g}/hr"
            )

        if feature == "experience":
            return (
                f"{candidate.experience_level.display_name} experience meets "
                f"{requirement.experience_level.display_name} requirement"
            )

        if feature == "language":
            if requirement.preferred_language == TrainingLanguage.BILINGUAL:
                return "Delivers training in English and Arabic"
            return f"Delivers training in {requirement.preferred_language.display_name}"

        if feature == "format":
            if full:
                return f"Offers {requirement.format.display_name.lower()} delivery"
            # Partial format fits score 0.5, so this needs a threshold of 0.5 or lower
            if TrainingFormat.HYBRID in candidate.formats:
                return f"Offers hybrid delivery ({requirement.format.display_name.lower()} requested)"
            offered = sorted(f.display_name.lower() for f in candidate.formats)
            return f"Offers {' and '.join(offered)} delivery (hybrid requested)"

        if feature == "rating":
            return f"Highly rated: {candidate.rating:.1f}/5"

        return f"Strong {feature} fit"


def _priority(feature: str) -> int:
    try:
        return REASON_PRIORITY.index(feature)
    except ValueError:
        return len(REASON_PRIORITY)


def build_insights(results: Sequence[MatchResult]) -> MatchInsights:
    """
    Summarize a result set.

    Args:
        results: Ranked (or unranked) match results

    Returns:
        MatchInsights with average and top score, the distribution of match
        strengths, and per-factor averages strongest first
    """
    if not results:
        return MatchInsights()

    scores = [r.score for r in results]
    strengths = Counter(MatchStrength(r.strength).value for r in results)

    totals: dict[str, list[float]] = {}
    for result in results:
        for feature, value in result.breakdown.items():
            totals.setdefault(feature, []).append(value)

    factors = sorted(
        (
            FactorInsight(feature=feature, average=round(sum(values) / len(values), 4))
            for feature, values in totals.items()
        ),
        key=lambda f: (-f.average, f.feature),
    )

    return MatchInsights(
        total_matches=len(results),
        average_score=round(sum(scores) / len(scores), 4),
        top_score=max(scores),
        strength_distribution=dict(sorted(strengths.items())),
        factors=tuple(factors),
    )


def summarize(result: MatchResult, job_title: Optional[str] = None) -> str:
    """One-line summary of a match, e.g. for CLI output or notifications."""
    name = result.name or result.professional_id
    target = f" for {job_title}" if job_title else ""
    label = result.strength.label.lower()
    article = "an" if label[0] in "aeiou" else "a"
    return f"{name} is {article} {label}{target} ({result.score:.0%})"
