"""
Pydantic data models and schemas for Nexus Match.

This module provides all data models used throughout the application,
including database documents, matching inputs and match results.
"""

# Base models
from .base import (
    BaseDocument,
    EmbeddedModel,
    PyObjectId,
    TimestampMixin,
    coerce_enum,
    ensure_utc,
    utc_now,
)

# Matching inputs
from .requirement import Requirement, parse_requirement
from .candidate import Candidate

# Match models
from .match import (
    FactorInsight,
    FeatureContribution,
    JobMatch,
    MatchFeedback,
    MatchInsights,
    MatchResponse,
    MatchResult,
    ScoreCard,
    ScoringWeights,
)

# Job models
from .job import JOB_CONTENT_FIELDS, DeletionReport, JobCreate, JobPosting

# Application models
from .application import Application

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "PyObjectId",
    "TimestampMixin",
    "coerce_enum",
    "ensure_utc",
    "utc_now",
    # Matching inputs
    "Requirement",
    "parse_requirement",
    "Candidate",
    # Match
    "FactorInsight",
    "FeatureContribution",
    "JobMatch",
    "MatchFeedback",
    "MatchInsights",
    "MatchResponse",
    "MatchResult",
    "ScoreCard",
    "ScoringWeights",
    # Job
    "JOB_CONTENT_FIELDS",
    "DeletionReport",
    "JobCreate",
    "JobPosting",
    # Application
    "Application",
]
