"""
Shared fixtures for speechtrack tests.

Provides a pinned clock, deterministic ids and a small catalog:
- "F80.2": G1 -> G2 -> G3
- "H90":   H1 -> H2
"""

import itertools
import time
from datetime import datetime, timedelta, timezone

import pytest

from speechtrack.schemas import Category, Goal, SessionOutcome
from speechtrack.tracker import GoalCatalog, ProgressQuery, ProgressStore


NOW = datetime(2024, 5, 20, 10, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that returns a fixed time unless advanced."""

    def __init__(self, now: datetime = NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


def make_outcome(is_passed: bool, therapist: str = "Dr. Farah", day: int = 0) -> SessionOutcome:
    passed = 4 if is_passed else 1
    return SessionOutcome(
        is_passed=is_passed,
        date=NOW - timedelta(days=day),
        activities_passed=passed,
        activities_total=5,
        therapist_name=therapist,
    )


CHILD_FIELDS = {
    "child_name": "Ayaan Khan",
    "mr_number": "01-1001",
    "dob": "12/03/2019",
    "gender": "Male",
    "parent_name": "Sana Khan",
}


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def catalog():
    return GoalCatalog([
        Category(id="F80.2", title="Receptive language", goals=[
            Goal(id="G1", title="Listening"),
            Goal(id="G2", title="Looking"),
            Goal(id="G3", title="Mutual gaze"),
        ]),
        Category(id="H90", title="Hearing impairment", goals=[
            Goal(id="H1", title="Auditory awareness"),
            Goal(id="H2", title="Auditory discrimination"),
        ]),
    ])


@pytest.fixture
def store(catalog, clock, ids):
    return ProgressStore(catalog, clock=clock, id_generator=ids)


@pytest.fixture
def query(store):
    return ProgressQuery(store)


@pytest.fixture
def child(store):
    return store.create_child(CHILD_FIELDS)


@pytest.fixture
def record(store, child):
    """Record a sequence of pass/fail results on one goal."""
    def _record(results, category_id="F80.2", goal_id="G1"):
        progress = None
        for result in results:
            progress = store.record_session(child.id, category_id, goal_id, make_outcome(result))
        return progress
    return _record


@pytest.fixture
def utc_plus_five(monkeypatch):
    """Run with the process local time set to UTC+5 (POSIX TZ string)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "PKT-5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
