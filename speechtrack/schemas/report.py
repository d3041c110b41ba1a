"""
Read-model schemas for speechtrack.

Defines Pydantic models returned by the query layer:
- Streak status for a single goal
- Unlocked goal listings
- Child report with per-category breakdown
- Level status for the level gate
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .progress import GoalProgress, SessionRecord


class UnlockedGoal(BaseModel):
    goal_id: str
    progress: GoalProgress


class StreakStatus(BaseModel):
    consecutive_passes: int = Field(..., ge=0)
    total_sessions: int = Field(..., ge=0)
    passed: bool
    streak_broken: bool  # latest session failed on a not-yet-passed goal


class CategoryStats(BaseModel):
    passed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    success_rate_percent: int = Field(..., ge=0, le=100)


class ChildReport(BaseModel):
    """Aggregated summary derived from a child's session log."""
    child_id: str
    total_sessions: int = Field(..., ge=0)
    passed_sessions: int = Field(..., ge=0)
    success_rate_percent: int = Field(..., ge=0, le=100)
    sessions_by_category: dict[str, list[SessionRecord]] = {}
    category_progress: dict[str, CategoryStats] = {}
    last_session: Optional[SessionRecord] = None
    created_at: datetime


class LevelStatus(BaseModel):
    number: int = Field(..., ge=1)  # 1-based
    goal_ids: list[str]
    passed_count: int = Field(..., ge=0)
    completion_percent: int = Field(..., ge=0, le=100)
    open: bool
