"""
Match and scoring data models for Nexus Match.

Defines the schema for scoring contributions, ranked match results,
and the responses published by matching passes.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from nexus_match.utils.constants import DEFAULT_SCORING_WEIGHTS, MatchStatus, MatchStrength


class ScoringWeights(BaseModel):
    """Relative weights of the scored features."""

    model_config = ConfigDict(frozen=True)

    sector: float = Field(default=0.35, ge=0, le=1)
    language: float = Field(default=0.15, ge=0, le=1)
    format: float = Field(default=0.15, ge=0, le=1)
    experience: float = Field(default=0.15, ge=0, le=1)
    budget: float = Field(default=0.15, ge=0, le=1)
    rating: float = Field(default=0.05, ge=0, le=1)

    @classmethod
    def from_defaults(cls) -> "ScoringWeights":
        """Create scoring weights from default constants."""
        return cls(**DEFAULT_SCORING_WEIGHTS)

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return self.model_dump()

    @property
    def total_weight(self) -> float:
        """Calculate sum of all weights."""
        return sum(self.to_dict().values())


class FeatureContribution(BaseModel):
    """One scored feature of a requirement/candidate pair."""

    model_config = ConfigDict(frozen=True)

    feature: str
    value: float = Field(..., ge=0, le=1)  # normalized 0-1 fit
    weight: float = Field(..., ge=0, le=1)  # re-normalized weight

    @property
    def weighted(self) -> float:
        return self.value * self.weight


class ScoreCard(BaseModel):
    """Output of the scoring engine for a single candidate."""

    model_config = ConfigDict(frozen=True)

    professional_id: str
    score: float = Field(..., ge=0, le=1)
    contributions: tuple[FeatureContribution, ...] = ()
    reasons: tuple[str, ...] = ()

    @property
    def breakdown(self) -> dict[str, float]:
        """Feature name -> normalized value for every scored contribution."""
        return {c.feature: c.value for c in self.contributions}


class MatchResult(BaseModel):
    """
    A scored candidate as published to callers.

    rank is None until the ranker has ordered and truncated the result set.
    """

    model_config = ConfigDict(frozen=True)

    professional_id: str
    score: float = Field(..., ge=0, le=1)
    reasons: tuple[str, ...] = ()
    rank: Optional[int] = Field(default=None, ge=1)

    strength: MatchStrength = MatchStrength.BASIC
    breakdown: dict[str, float] = Field(default_factory=dict)

    # Display and tie-break fields copied from the candidate
    name: str = ""
    title: str = ""
    rating: Optional[float] = None

    @property
    def strength_label(self) -> str:
        return self.strength.label


class FactorInsight(BaseModel):
    """Average fit of one factor across a result set."""

    model_config = ConfigDict(frozen=True)

    feature: str
    average: float


class MatchInsights(BaseModel):
    """Aggregate view of a ranked result set."""

    model_config = ConfigDict(frozen=True)

    total_matches: int = 0
    average_score: float = 0.0
    top_score: float = 0.0
    strength_distribution: dict[str, int] = Field(default_factory=dict)
    factors: tuple[FactorInsight, ...] = ()  # strongest first

    @property
    def strongest_factor(self) -> Optional[str]:
        return self.factors[0].feature if self.factors else None


class MatchResponse(BaseModel):
    """Result of one matching pass, or of the latest pass of a session."""

    model_config = ConfigDict(frozen=True)

    status: MatchStatus
    results: tuple[MatchResult, ...] = ()
    fingerprint: Optional[str] = None
    snapshot_version: Optional[int] = None
    retry_after_seconds: Optional[float] = None
    missing_fields: tuple[str, ...] = ()
    insights: Optional[MatchInsights] = None

    # Set by MatchSession when the response is published
    revision: int = 0

    @property
    def is_ok(self) -> bool:
        return self.status == MatchStatus.OK

    def same_output(self, other: Optional["MatchResponse"]) -> bool:
        """Whether another response would render identically for a caller."""
        if other is None:
            return False
        return (
            self.status == other.status
            and self.results == other.results
            and self.missing_fields == other.missing_fields
        )


class JobMatch(BaseModel):
    """A live job scored against one candidate (reverse matching)."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    title: str
    company_id: str
    score: float = Field(..., ge=0, le=1)
    reasons: tuple[str, ...] = ()
    strength: MatchStrength = MatchStrength.BASIC
    rank: Optional[int] = Field(default=None, ge=1)


class MatchFeedback(BaseModel):
    """Booking feedback from a company about a recommended professional."""

    model_config = ConfigDict(frozen=True)

    company_id: str = Field(..., min_length=1)
    professional_id: str = Field(..., min_length=1)
    booked: bool
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comments: Optional[str] = None
    job_id: Optional[str] = None
