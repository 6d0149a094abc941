"""Requirement-to-candidate matching: scoring, ranking, explanation and sessions."""

from .concurrency import CancellationToken, PollScheduler
from .explanation import ExplanationGenerator, build_insights, summarize
from .matching_engine import MatchingEngine, get_matching_engine
from .ranker import Ranker, validate_k
from .scoring import FEATURES, ScoringEngine
from .session import MatchSession
from .snapshot import CandidateSnapshot, CandidateSnapshotProvider

__all__ = [
    "CancellationToken",
    "PollScheduler",
    "ExplanationGenerator",
    "build_insights",
    "summarize",
    "MatchingEngine",
    "get_matching_engine",
    "Ranker",
    "validate_k",
    "FEATURES",
    "ScoringEngine",
    "MatchSession",
    "CandidateSnapshot",
    "CandidateSnapshotProvider",
]
