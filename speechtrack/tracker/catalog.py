"""
GoalCatalog - Read-only access to the goal bank.

Provides:
- Ordered categories
- Goal lookup by (category, goal)
- Next-goal sequencing used by the unlock chain
"""

from pathlib import Path
from typing import Iterable, Optional

from speechtrack.schemas import Category, Goal
from speechtrack.utils.goal_bank import load_goal_bank, parse_categories

from .errors import NotFoundError


class GoalCatalog:
    """
    Immutable category -> goal hierarchy.

    Goal order inside a category is the unlock order. The catalog is built
    once and never changes, so it is safe to share between stores and threads.
    """

    def __init__(self, categories: Iterable[Category]):
        """
        Initialize catalog.

        Args:
            categories: Categories in display order

        Raises:
            ValueError: If empty or category ids repeat
        """
        self._categories: tuple[Category, ...] = tuple(categories)
        if not self._categories:
            raise ValueError("Goal catalog must contain at least one category")

        self._by_id: dict[str, Category] = {}
        self._goal_index: dict[str, dict[str, int]] = {}
        for category in self._categories:
            if category.id in self._by_id:
                raise ValueError(f"Duplicate category id: {category.id}")
            self._by_id[category.id] = category
            self._goal_index[category.id] = {
                goal.id: idx for idx, goal in enumerate(category.goals)
            }

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "GoalCatalog":
        """Load a catalog from a goal bank YAML (bundled file by default)."""
        return cls(parse_categories(load_goal_bank(path)))

    @classmethod
    def default(cls) -> "GoalCatalog":
        return cls.from_yaml()

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        """All categories in stable order."""
        return list(self._categories)

    def get_category(self, category_id: str) -> Category:
        category = self._by_id.get(category_id)
        if category is None:
            raise NotFoundError(f"Unknown category: {category_id}")
        return category

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def contains(self, category_id: str, goal_id: str) -> bool:
        """True if goal_id belongs to category_id."""
        return goal_id in self._goal_index.get(category_id, {})

    def get_goal(self, category_id: str, goal_id: str) -> Goal:
        """Look up a goal; NotFoundError if the category or goal is unknown."""
        category = self.get_category(category_id)
        idx = self._goal_index[category_id].get(goal_id)
        if idx is None:
            raise NotFoundError(f"Unknown goal {goal_id} in category {category_id}")
        return category.goals[idx]

    def next_goal(self, category_id: str, goal_id: str) -> Optional[Goal]:
        """Goal following goal_id in catalog order, or None for the last goal."""
        category = self.get_category(category_id)
        self.get_goal(category_id, goal_id)
        idx = self._goal_index[category_id][goal_id]
        if idx + 1 >= len(category.goals):
            return None
        return category.goals[idx + 1]

    def goal_position(self, category_id: str, goal_id: str) -> tuple[int, int]:
        """Goal position as (current, total), 1-based."""
        category = self.get_category(category_id)
        self.get_goal(category_id, goal_id)
        return (self._goal_index[category_id][goal_id] + 1, len(category.goals))
