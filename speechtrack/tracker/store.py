"""
ProgressStore - Single writer for all child progress.

Stores per-child state in memory:
- Demographics and creation time
- Per-goal session outcomes with pass/unlock flags
- Global session log used by reports

Every write is applied to a private copy of the child and published only
after the whole update succeeded, so readers never see half an update.
"""

import logging
import threading
from typing import Any, Optional

from speechtrack.config import Settings, get_settings
from speechtrack.schemas import (
    Child,
    ChildFields,
    GoalProgress,
    SessionOutcome,
    SessionRecord,
)
from speechtrack.utils.clock import Clock, IdGenerator, SystemClock, is_future_day, uuid_ids

from .catalog import GoalCatalog
from .errors import (
    IncompleteSessionError,
    InvalidReferenceError,
    InvariantViolation,
    NotFoundError,
)

logger = logging.getLogger(__name__)

DEFAULT_PASS_STREAK = 3


def count_trailing_passes(sessions: list[SessionOutcome]) -> int:
    """Length of the run of passed sessions ending at the latest one."""
    count = 0
    for session in reversed(sessions):
        if not session.is_passed:
            break
        count += 1
    return count


class ProgressStore:
    """
    In-memory progress store.

    One instance per deployment; pass it explicitly to queries and
    recorders instead of reaching for a global.
    """

    def __init__(
        self,
        catalog: GoalCatalog,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        pass_streak: int = DEFAULT_PASS_STREAK,
    ):
        """
        Initialize progress store.

        Args:
            catalog: Goal catalog used for seeding and unlock sequencing
            clock: Time source for creation timestamps (default: UTC wall clock)
            id_generator: Callable returning unique ids (default: uuid4 hex)
            pass_streak: Consecutive passes needed to pass a goal
        """
        if pass_streak < 1:
            raise ValueError("pass_streak must be at least 1")
        self.catalog = catalog
        self.clock = clock or SystemClock()
        self.pass_streak = pass_streak
        self._new_id = id_generator or uuid_ids
        self._children: dict[str, Child] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> "ProgressStore":
        """Empty store using the configured goal bank and pass streak."""
        settings = settings or get_settings()
        catalog = GoalCatalog.from_yaml(settings.goal_bank_path)
        return cls(catalog, clock=clock, id_generator=id_generator, pass_streak=settings.pass_streak)

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    def create_child(self, fields: ChildFields | dict[str, Any]) -> Child:
        """
        Register a child and open the first goal of every category.

        Raises:
            pydantic.ValidationError: If a demographic field is blank
        """
        if not isinstance(fields, ChildFields):
            fields = ChildFields.model_validate(fields)

        progress = {
            category.id: {category.first_goal.id: GoalProgress(unlocked=True)}
            for category in self.catalog.list_categories()
        }

        with self._lock:
            child_id = self._new_id()
            if child_id in self._children:
                logger.error(f"Id generator returned duplicate child id {child_id}")
                raise InvariantViolation(f"Duplicate child id: {child_id}")

            child = Child(
                id=child_id,
                created_at=self.clock.now(),
                progress=progress,
                sessions=[],
                **fields.model_dump(),
            )
            self._children[child_id] = child

        logger.info(f"Created child {child_id} ({fields.mr_number})")
        return child.model_copy(deep=True)

    def get_child(self, child_id: str) -> Child:
        """Snapshot copy of a child; NotFoundError if unknown."""
        return self.published_child(child_id).model_copy(deep=True)

    def list_children(self) -> list[Child]:
        """All children in creation order."""
        with self._lock:
            children = list(self._children.values())
        return [child.model_copy(deep=True) for child in children]

    def find_by_mr_number(self, mr_number: str) -> list[Child]:
        """Children whose MR number matches exactly (surrounding spaces ignored)."""
        wanted = mr_number.strip()
        return [child for child in self.list_children() if child.mr_number == wanted]

    def has_child(self, child_id: str) -> bool:
        with self._lock:
            return child_id in self._children

    def published_child(self, child_id: str) -> Child:
        """Current published child. Callers must not mutate it."""
        with self._lock:
            child = self._children.get(child_id)
        if child is None:
            raise NotFoundError(f"Unknown child: {child_id}")
        return child

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def record_session(
        self,
        child_id: str,
        category_id: str,
        goal_id: str,
        outcome: SessionOutcome,
    ) -> GoalProgress:
        """
        Append a session outcome to a goal and apply the pass/unlock rules.

        A goal passes once its trailing run of passed sessions reaches
        ``pass_streak``. Passing is permanent and opens the next goal in the
        category (nothing opens after the last goal).

        Returns:
            Copy of the goal's updated progress

        Raises:
            NotFoundError: Unknown child or category
            InvalidReferenceError: Goal is not part of the category
            IncompleteSessionError: Outcome is dated after today
            InvariantViolation: Update would break a progress invariant
        """
        with self._lock:
            current = self.published_child(child_id)
            self.catalog.get_category(category_id)
            if not self.catalog.contains(category_id, goal_id):
                raise InvalidReferenceError(
                    f"Goal {goal_id} does not belong to category {category_id}"
                )
            if is_future_day(outcome.date, self.clock.now()):
                raise IncompleteSessionError(
                    f"Session date {outcome.date.date()} is in the future"
                )

            child = current.model_copy(deep=True)
            goals = child.progress.setdefault(category_id, {})
            goal = goals.get(goal_id)
            if goal is None:
                logger.warning(
                    f"No progress entry for {category_id}/{goal_id} on child {child_id}, creating one"
                )
                goal = goals[goal_id] = GoalProgress(unlocked=True)

            was_passed = goal.passed
            goal.sessions.append(outcome)

            streak = count_trailing_passes(goal.sessions)
            if streak >= self.pass_streak and not was_passed:
                goal.passed = True
                logger.info(
                    f"Child {child_id} passed {category_id}/{goal_id} after {len(goal.sessions)} sessions"
                )
                self._unlock_next(child, category_id, goal_id)

            child.sessions.append(SessionRecord.from_outcome(
                outcome,
                record_id=self._new_id(),
                child_id=child_id,
                category_id=category_id,
                goal_id=goal_id,
            ))

            self._check_update(current, child, category_id, goal_id, streak)
            self._children[child_id] = child

        logger.debug(
            f"Recorded {'pass' if outcome.is_passed else 'fail'} for {category_id}/{goal_id} "
            f"on child {child_id} (streak {streak})"
        )
        return goal.model_copy(deep=True)

    def _unlock_next(self, child: Child, category_id: str, goal_id: str):
        """Open the goal after goal_id, if any."""
        next_goal = self.catalog.next_goal(category_id, goal_id)
        if next_goal is None:
            logger.info(f"Child {child.id} completed the last goal in {category_id}")
            return

        goals = child.progress[category_id]
        entry = goals.get(next_goal.id)
        if entry is None:
            goals[next_goal.id] = GoalProgress(unlocked=True)
        elif not entry.unlocked:
            entry.unlocked = True
        else:
            return
        logger.info(f"Unlocked {category_id}/{next_goal.id} for child {child.id}")

    def _check_update(self, before: Child, after: Child, category_id: str, goal_id: str, streak: int):
        """Refuse to publish an update that breaks an invariant."""
        problems = []
        if streak < 0:
            problems.append(f"negative streak {streak}")
        if len(after.sessions) != len(before.sessions) + 1:
            problems.append("session log did not grow by exactly one entry")

        old_goal = before.progress.get(category_id, {}).get(goal_id)
        new_goal = after.progress[category_id][goal_id]
        old_count = len(old_goal.sessions) if old_goal else 0
        if len(new_goal.sessions) != old_count + 1:
            problems.append("goal session list did not grow by exactly one entry")

        for cat_id, goals in before.progress.items():
            for gid, old in goals.items():
                new = after.progress.get(cat_id, {}).get(gid)
                if new is None:
                    problems.append(f"progress entry {cat_id}/{gid} disappeared")
                elif old.passed and not new.passed:
                    problems.append(f"passed goal {cat_id}/{gid} would be un-passed")
                elif old.unlocked and not new.unlocked:
                    problems.append(f"unlocked goal {cat_id}/{gid} would be locked again")

        if problems:
            for problem in problems:
                logger.error(f"Invariant violation on child {before.id}: {problem}")
            raise InvariantViolation("; ".join(problems))

    # -------------------------------------------------------------------------
    # Snapshot Export
    # -------------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        """Full store as plain dicts/lists (JSON-compatible)."""
        with self._lock:
            children = list(self._children.values())
        return {"children": [child.model_dump(mode="json") for child in children]}

    @classmethod
    def from_snapshot(
        cls,
        data: dict[str, Any],
        catalog: GoalCatalog,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        pass_streak: int = DEFAULT_PASS_STREAK,
    ) -> "ProgressStore":
        """
        Rebuild a store from to_snapshot() output.

        Raises:
            pydantic.ValidationError: If a child record is malformed
            InvalidReferenceError: If progress references goals outside the catalog
            InvariantViolation: If two children share an id
        """
        store = cls(catalog, clock=clock, id_generator=id_generator, pass_streak=pass_streak)
        for raw in data.get("children", []):
            child = Child.model_validate(raw)
            if child.id in store._children:
                logger.error(f"Snapshot contains duplicate child id {child.id}")
                raise InvariantViolation(f"Duplicate child id: {child.id}")
            for category_id, goals in child.progress.items():
                for goal_id in goals:
                    if not catalog.contains(category_id, goal_id):
                        raise InvalidReferenceError(
                            f"Snapshot child {child.id} references unknown goal {category_id}/{goal_id}"
                        )
            store._children[child.id] = child
        logger.info(f"Loaded {len(store._children)} children from snapshot")
        return store
