"""Job posting lifecycle."""

from .lifecycle import INITIAL_STATUSES, TRANSITIONS, JobLifecycle, can_transition

__all__ = [
    "INITIAL_STATUSES",
    "TRANSITIONS",
    "JobLifecycle",
    "can_transition",
]
