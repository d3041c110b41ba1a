"""
ProgressQuery - Derived, read-only views over a ProgressStore.

Provides:
- Per-category progress and unlocked goal listings
- Current goal selection
- Streak status for the session screen
- Child report aggregation
"""

from typing import Optional

from speechtrack.schemas import (
    CategoryStats,
    Child,
    ChildReport,
    GoalProgress,
    SessionRecord,
    StreakStatus,
    UnlockedGoal,
)

from .store import ProgressStore, count_trailing_passes


def success_rate(passed: int, total: int) -> int:
    """Whole-number pass percentage; 0 when there is nothing to rate."""
    if total <= 0:
        return 0
    # half-up rounding, not Python's banker's rounding
    return (200 * passed + total) // (2 * total)


class ProgressQuery:
    """
    Read-side companion to ProgressStore.

    Every method works on the child's currently published snapshot and
    returns copies, so callers cannot alter store state through results.
    """

    def __init__(self, store: ProgressStore):
        self.store = store

    @property
    def catalog(self):
        return self.store.catalog

    def _child(self, child_id: str) -> Child:
        return self.store.published_child(child_id)

    def _category_progress(self, child: Child, category_id: str) -> dict[str, GoalProgress]:
        self.catalog.get_category(category_id)
        return child.progress.get(category_id, {})

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def get_progress(self, child_id: str, category_id: str) -> dict[str, GoalProgress]:
        """goal_id -> progress for a category; empty if nothing recorded."""
        progress = self._category_progress(self._child(child_id), category_id)
        return {goal_id: gp.model_copy(deep=True) for goal_id, gp in progress.items()}

    def get_unlocked_goals(self, child_id: str, category_id: str) -> list[UnlockedGoal]:
        """Unlocked goals in catalog order."""
        progress = self._category_progress(self._child(child_id), category_id)
        category = self.catalog.get_category(category_id)
        return [
            UnlockedGoal(goal_id=goal.id, progress=progress[goal.id].model_copy(deep=True))
            for goal in category.goals
            if goal.id in progress and progress[goal.id].unlocked
        ]

    def get_current_goal(self, child_id: str, category_id: str) -> Optional[UnlockedGoal]:
        """
        Goal the therapist should work on next.

        Priority:
        1. First unlocked goal that is not yet passed
        2. Last unlocked goal (category exhausted)
        3. None if nothing is unlocked
        """
        unlocked = self.get_unlocked_goals(child_id, category_id)
        for entry in unlocked:
            if not entry.progress.passed:
                return entry
        return unlocked[-1] if unlocked else None

    def get_streak_status(self, child_id: str, category_id: str, goal_id: str) -> StreakStatus:
        """Streak details for one goal; zeros if the goal has no entry yet."""
        self.catalog.get_goal(category_id, goal_id)
        progress = self._category_progress(self._child(child_id), category_id)
        goal = progress.get(goal_id)
        if goal is None:
            return StreakStatus(consecutive_passes=0, total_sessions=0, passed=False, streak_broken=False)

        sessions = goal.sessions
        latest_failed = bool(sessions) and not sessions[-1].is_passed
        return StreakStatus(
            consecutive_passes=count_trailing_passes(sessions),
            total_sessions=len(sessions),
            passed=goal.passed,
            streak_broken=latest_failed and not goal.passed,
        )

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def get_child_report(self, child_id: str) -> ChildReport:
        """Aggregate a child's session log into a report."""
        child = self._child(child_id)
        sessions = child.sessions

        by_category: dict[str, list[SessionRecord]] = {}
        for record in sessions:
            by_category.setdefault(record.category_id, []).append(record)

        category_progress = {}
        for category_id, records in by_category.items():
            passed = sum(1 for r in records if r.is_passed)
            category_progress[category_id] = CategoryStats(
                passed=passed,
                total=len(records),
                success_rate_percent=success_rate(passed, len(records)),
            )

        passed_sessions = sum(1 for r in sessions if r.is_passed)
        return ChildReport(
            child_id=child.id,
            total_sessions=len(sessions),
            passed_sessions=passed_sessions,
            success_rate_percent=success_rate(passed_sessions, len(sessions)),
            sessions_by_category=by_category,
            category_progress=category_progress,
            last_session=sessions[-1] if sessions else None,
            created_at=child.created_at,
        ).model_copy(deep=True)

    def get_category_summary(self, child_id: str, category_id: str) -> dict:
        """Goal counts for a category card."""
        category = self.catalog.get_category(category_id)
        progress = self._category_progress(self._child(child_id), category_id)
        passed = sum(1 for gp in progress.values() if gp.passed)
        unlocked = sum(1 for gp in progress.values() if gp.unlocked)
        total = len(category.goals)
        current = self.get_current_goal(child_id, category_id)

        return {
            "category_id": category.id,
            "title": category.title,
            "total_goals": total,
            "unlocked_goals": unlocked,
            "passed_goals": passed,
            "completion_percent": success_rate(passed, total),
            "current_goal_id": current.goal_id if current else None,
        }
