"""
LevelGate - Group a category's goals into levels with a completion gate.

Goals are chunked into consecutive levels of ``level_size``. Level 1 is
always open; each later level opens once the previous level has at least
``unlock_percent`` of its goals passed. The gate is read-only and layered
on top of goal unlocking: it never changes a goal's unlocked flag.
"""

from typing import Optional

from speechtrack.config import Settings, get_settings
from speechtrack.schemas import LevelStatus

from .query import ProgressQuery, success_rate

DEFAULT_LEVEL_SIZE = 5
DEFAULT_UNLOCK_PERCENT = 60


class LevelGate:

    def __init__(
        self,
        query: ProgressQuery,
        level_size: int = DEFAULT_LEVEL_SIZE,
        unlock_percent: int = DEFAULT_UNLOCK_PERCENT,
    ):
        if level_size < 1:
            raise ValueError("level_size must be at least 1")
        if not 0 <= unlock_percent <= 100:
            raise ValueError("unlock_percent must be between 0 and 100")
        self.query = query
        self.level_size = level_size
        self.unlock_percent = unlock_percent

    @classmethod
    def from_settings(cls, query: ProgressQuery, settings: Optional[Settings] = None) -> "LevelGate":
        settings = settings or get_settings()
        return cls(query, settings.level_size, settings.level_unlock_percent)

    def get_levels(self, child_id: str, category_id: str) -> list[LevelStatus]:
        category = self.query.catalog.get_category(category_id)
        passed_ids = {
            entry.goal_id
            for entry in self.query.get_unlocked_goals(child_id, category_id)
            if entry.progress.passed
        }

        levels: list[LevelStatus] = []
        goal_ids = category.goal_ids
        for number, start in enumerate(range(0, len(goal_ids), self.level_size), start=1):
            chunk = goal_ids[start:start + self.level_size]
            passed_count = sum(1 for gid in chunk if gid in passed_ids)
            if levels:
                previous = levels[-1]
                is_open = previous.open and self._meets_gate(previous)
            else:
                is_open = True
            levels.append(LevelStatus(
                number=number,
                goal_ids=chunk,
                passed_count=passed_count,
                completion_percent=success_rate(passed_count, len(chunk)),
                open=is_open,
            ))
        return levels

    def _meets_gate(self, level: LevelStatus) -> bool:
        # exact ratio, so 3 of 5 meets a 60% gate
        return 100 * level.passed_count >= self.unlock_percent * len(level.goal_ids)

    def is_level_open(self, child_id: str, category_id: str, number: int) -> bool:
        levels = self.get_levels(child_id, category_id)
        if not 1 <= number <= len(levels):
            raise IndexError(f"Level out of range: {number}")
        return levels[number - 1].open
