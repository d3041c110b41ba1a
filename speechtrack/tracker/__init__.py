"""
speechtrack Tracker - Runtime components for tracking therapy goals.

This module provides:
- GoalCatalog: Read-only goal bank
- ProgressStore: Child progress and the unlock chain
- ProgressQuery: Derived views and reports
- SessionRecorder: Activity checklist to session outcome
- LevelGate: Level grouping over unlocked goals
"""

from .errors import (
    TrackerError,
    NotFoundError,
    InvalidReferenceError,
    IncompleteSessionError,
    SessionAlreadySubmittedError,
    InvariantViolation,
)

from .catalog import GoalCatalog

from .store import (
    ProgressStore,
    count_trailing_passes,
    DEFAULT_PASS_STREAK,
)

from .query import (
    ProgressQuery,
    success_rate,
)

from .recorder import (
    SessionRecorder,
    build_outcome,
    is_majority_pass,
    DEFAULT_ACTIVITY_COUNT,
)

from .levels import (
    LevelGate,
    DEFAULT_LEVEL_SIZE,
    DEFAULT_UNLOCK_PERCENT,
)

__all__ = [
    # Errors
    "TrackerError",
    "NotFoundError",
    "InvalidReferenceError",
    "IncompleteSessionError",
    "SessionAlreadySubmittedError",
    "InvariantViolation",
    # Catalog
    "GoalCatalog",
    # Store
    "ProgressStore",
    "count_trailing_passes",
    "DEFAULT_PASS_STREAK",
    # Query
    "ProgressQuery",
    "success_rate",
    # Recorder
    "SessionRecorder",
    "build_outcome",
    "is_majority_pass",
    "DEFAULT_ACTIVITY_COUNT",
    # Levels
    "LevelGate",
    "DEFAULT_LEVEL_SIZE",
    "DEFAULT_UNLOCK_PERCENT",
]
