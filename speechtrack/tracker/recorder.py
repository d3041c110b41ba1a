"""
SessionRecorder - Turn a graded activity checklist into one session outcome.

A session is a fixed checklist (5 activities by default). Each activity is
marked pass or fail; the session passes when strictly more than half of
the activities passed. The recorder submits once and then freezes.
"""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from speechtrack.config import Settings, get_settings
from speechtrack.schemas import GoalProgress, SessionOutcome
from speechtrack.utils.clock import Clock, SystemClock, as_utc, is_future_day

from .errors import IncompleteSessionError, SessionAlreadySubmittedError
from .store import ProgressStore

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_COUNT = 5


def is_majority_pass(activities_passed: int, activities_total: int) -> bool:
    """Strict majority: 3 of 5 passes, 2 of 4 does not."""
    return 2 * activities_passed > activities_total


def build_outcome(
    activities: Sequence[Optional[bool]],
    therapist_name: str,
    session_date: datetime | date,
    now: datetime,
) -> SessionOutcome:
    """
    Derive a SessionOutcome from marked activities.

    Args:
        activities: One entry per activity; None means not yet marked
        therapist_name: Name of the therapist running the session
        session_date: When the session took place
        now: Current time, used to reject future-dated sessions

    Raises:
        IncompleteSessionError: Empty checklist, unmarked activities, blank
            therapist name, or a session date after today
    """
    if not activities:
        raise IncompleteSessionError("Session has no activities")

    unmarked = [i + 1 for i, status in enumerate(activities) if status is None]
    if unmarked:
        raise IncompleteSessionError(f"Activities not marked: {unmarked}")

    name = (therapist_name or "").strip()
    if not name:
        raise IncompleteSessionError("Therapist name is required")

    if is_future_day(session_date, now):
        raise IncompleteSessionError(f"Session date {session_date} is in the future")
    when = as_utc(session_date)

    passed = sum(1 for status in activities if status is True)
    total = len(activities)
    return SessionOutcome(
        is_passed=is_majority_pass(passed, total),
        date=when,
        activities_passed=passed,
        activities_total=total,
        therapist_name=name,
    )


class SessionRecorder:
    """
    One therapy session for a single child and goal.

    Usage:
        recorder = SessionRecorder(store, child_id, "F80.2", "RL.01")
        for i, ok in enumerate([True, True, False, True, False]):
            recorder.mark(i, ok)
        progress = recorder.submit("Dr. Amna")
    """

    def __init__(
        self,
        store: ProgressStore,
        child_id: str,
        category_id: str,
        goal_id: str,
        activity_count: int = DEFAULT_ACTIVITY_COUNT,
        clock: Optional[Clock] = None,
    ):
        if activity_count < 1:
            raise ValueError("activity_count must be at least 1")
        self.store = store
        self.child_id = child_id
        self.category_id = category_id
        self.goal_id = goal_id
        self.clock = clock or store.clock or SystemClock()
        self._activities: list[Optional[bool]] = [None] * activity_count
        self._outcome: Optional[SessionOutcome] = None
        self._result: Optional[GoalProgress] = None

    @classmethod
    def from_settings(
        cls,
        store: ProgressStore,
        child_id: str,
        category_id: str,
        goal_id: str,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> "SessionRecorder":
        """Recorder with the configured number of activities per session."""
        settings = settings or get_settings()
        return cls(
            store,
            child_id,
            category_id,
            goal_id,
            activity_count=settings.activities_per_session,
            clock=clock,
        )

    @property
    def activities(self) -> list[Optional[bool]]:
        return list(self._activities)

    @property
    def submitted(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Optional[SessionOutcome]:
        return self._outcome

    @property
    def pass_count(self) -> int:
        return sum(1 for status in self._activities if status is True)

    def mark(self, index: int, passed: Optional[bool]):
        """Mark activity ``index`` (0-based) as passed, failed or unmarked (None)."""
        if self.submitted:
            raise SessionAlreadySubmittedError("Session already submitted")
        if not 0 <= index < len(self._activities):
            raise IndexError(f"Activity index out of range: {index}")
        self._activities[index] = passed

    def mark_all(self, results: Sequence[Optional[bool]]):
        """Mark every activity at once; length must match the checklist."""
        if len(results) != len(self._activities):
            raise ValueError(
                f"Expected {len(self._activities)} results, got {len(results)}"
            )
        for index, passed in enumerate(results):
            self.mark(index, passed)

    def submit(
        self,
        therapist_name: str,
        session_date: Optional[datetime | date] = None,
    ) -> GoalProgress:
        """
        Finish the session and record it in the store.

        Args:
            therapist_name: Name of the therapist (required)
            session_date: Session date (default: now)

        Returns:
            The goal's updated progress

        Raises:
            SessionAlreadySubmittedError: If called a second time
            IncompleteSessionError: If the checklist or therapist name is
                incomplete, or the session date is after today
        """
        if self.submitted:
            raise SessionAlreadySubmittedError("Session already submitted")

        now = self.clock.now()
        outcome = build_outcome(
            self._activities,
            therapist_name,
            session_date if session_date is not None else now,
            now,
        )

        self._result = self.store.record_session(
            self.child_id, self.category_id, self.goal_id, outcome
        )
        self._outcome = outcome
        logger.debug(
            f"Submitted session for {self.category_id}/{self.goal_id}: "
            f"{outcome.activities_passed}/{outcome.activities_total} activities passed"
        )
        return self._result
