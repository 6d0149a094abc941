"""
Requirement-to-candidate scoring.

The score is a weighted sum of independent feature fits, each normalized
to 0-1 before weighting. Requirement fields that are unset drop out of
both the sum and the weight total.
"""

from typing import Optional

from nexus_match.data.models import (
    Candidate,
    FeatureContribution,
    Requirement,
    ScoreCard,
    ScoringWeights,
)
from nexus_match.utils.constants import (
    BUDGET_OVERRUN_LIMIT,
    EXPERIENCE_GAP_LIMIT,
    MAX_RATING,
    NEUTRAL_SCORE,
    SCORE_PRECISION,
    TrainingFormat,
    TrainingLanguage,
)
from nexus_match.utils.logger import get_logger

from .explanation import ExplanationGenerator

logger = get_logger(__name__)

# Scoring order; also the order of contributions on a ScoreCard
FEATURES: tuple[str, ...] = ("sector", "language", "format", "experience", "budget", "rating")


class ScoringEngine:
    """
    Pure scorer for (requirement, candidate) pairs.

    Holds no mutable state, so one instance can be shared by every worker
    of a parallel pass.
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights | dict[str, float]] = None,
        explainer: Optional[ExplanationGenerator] = None,
    ):
        """
        Initialize the scoring engine.

        Args:
            weights: Optional custom scoring weights
            explainer: Reason generator (default thresholds if omitted)
        """
        if weights is None:
            weights = ScoringWeights.from_defaults()
        elif isinstance(weights, dict):
            weights = ScoringWeights(**weights)
        self.weights = weights
        self.explainer = explainer or ExplanationGenerator()

    def score(self, requirement: Requirement, candidate: Candidate) -> ScoreCard:
        """
        Score one candidate against a requirement.

        Raises:
            ValidationError: If the requirement has no sector or training type
        """
        requirement.require_complete()

        fits = {
            "sector": self._match_sector(requirement, candidate),
            "language": self._match_language(requirement, candidate),
            "format": self._match_format(requirement, candidate),
            "experience": self._match_experience(requirement, candidate),
            "budget": self._match_budget(requirement, candidate),
            "rating": self._match_rating(candidate),
        }
        weights = self.weights.to_dict()
        scored = [f for f in FEATURES if fits[f] is not None]
        total_weight = sum(weights[f] for f in scored)

        contributions = tuple(
            FeatureContribution(
                feature=feature,
                value=fits[feature],
                weight=weights[feature] / total_weight if total_weight > 0 else 0.0,
            )
            for feature in scored
        )
        raw = sum(c.weighted for c in contributions)
        score = round(min(1.0, max(0.0, raw)), SCORE_PRECISION)

        return ScoreCard(
            professional_id=candidate.professional_id,
            score=score,
            contributions=contributions,
            reasons=self.explainer.reasons(contributions, requirement, candidate),
        )

    # -------------------------------------------------------------------------
    # Feature fits: None means the feature is not scored for this requirement
    # -------------------------------------------------------------------------

    @staticmethod
    def _match_sector(requirement: Requirement, candidate: Candidate) -> float:
        return 1.0 if requirement.sector in candidate.sectors else 0.0

    @staticmethod
    def _match_language(requirement: Requirement, candidate: Candidate) -> Optional[float]:
        wanted = requirement.preferred_language
        if wanted is None:
            return None

        offered = candidate.effective_languages
        if wanted == TrainingLanguage.BILINGUAL:
            covered = sum(
                1 for lang in (TrainingLanguage.ENGLISH, TrainingLanguage.ARABIC) if lang in offered
            )
            return covered / 2
        return 1.0 if wanted in offered else 0.0

    @staticmethod
    def _match_format(requirement: Requirement, candidate: Candidate) -> Optional[float]:
        wanted = requirement.format
        if wanted is None:
            return None

        if wanted in candidate.formats:
            return 1.0
        if TrainingFormat.HYBRID in candidate.formats:
            return 0.5
        if wanted == TrainingFormat.HYBRID and candidate.formats:
            return 0.5
        return 0.0

    @staticmethod
    def _match_experience(requirement: Requirement, candidate: Candidate) -> Optional[float]:
        if requirement.experience_level is None:
            return None

        gap = requirement.experience_level.ordinal - candidate.experience_level.ordinal
        if gap <= 0:
            return 1.0
        return max(0.0, 1.0 - gap / EXPERIENCE_GAP_LIMIT)

    @staticmethod
    def _match_budget(requirement: Requirement, candidate: Candidate) -> Optional[float]:
        budget = requirement.budget_per_hour
        if budget is None:
            return None

        rate = candidate.rate_per_hour
        if rate is None:
            return NEUTRAL_SCORE
        if rate <= budget:
            return 1.0
        overrun = (rate - budget) / budget
        return max(0.0, 1.0 - overrun / BUDGET_OVERRUN_LIMIT)

    @staticmethod
    def _match_rating(candidate: Candidate) -> float:
        if candidate.rating is None:
            return NEUTRAL_SCORE
        return min(1.0, candidate.rating / MAX_RATING)
