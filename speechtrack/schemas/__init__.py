"""
speechtrack Schemas - Pydantic models for the goal-tracking core.

This module exports all schema classes for:
- Catalog: categories and goals
- Progress: sessions, goal progress, children
- Report: streak status, reports, level status
"""

# Catalog schemas
from .catalog import (
    Goal,
    Category,
)

# Progress schemas
from .progress import (
    SessionOutcome,
    SessionRecord,
    GoalProgress,
    ChildFields,
    Child,
    require_text,
)

# Report schemas
from .report import (
    UnlockedGoal,
    StreakStatus,
    CategoryStats,
    ChildReport,
    LevelStatus,
)

__all__ = [
    # Catalog
    'Goal',
    'Category',
    # Progress
    'SessionOutcome',
    'SessionRecord',
    'GoalProgress',
    'ChildFields',
    'Child',
    'require_text',
    # Report
    'UnlockedGoal',
    'StreakStatus',
    'CategoryStats',
    'ChildReport',
    'LevelStatus',
]
