"""
ProgressStore tests.

Covers child creation, the streak rule, the unlock chain, atomicity and
snapshot export/import.
"""

import threading
from datetime import timedelta

import pytest
from pydantic import ValidationError

from conftest import CHILD_FIELDS, NOW, make_outcome
from speechtrack.schemas import GoalProgress
from speechtrack.tracker import (
    IncompleteSessionError,
    InvalidReferenceError,
    InvariantViolation,
    NotFoundError,
    ProgressStore,
    count_trailing_passes,
)


class TestCountTrailingPasses:

    def test_empty(self):
        assert count_trailing_passes([]) == 0

    def test_stops_at_failure(self):
        sessions = [make_outcome(r) for r in [True, False, True, True, True]]
        assert count_trailing_passes(sessions) == 3

    def test_latest_failure(self):
        sessions = [make_outcome(r) for r in [True, True, False]]
        assert count_trailing_passes(sessions) == 0

    def test_all_passed(self):
        sessions = [make_outcome(True) for _ in range(4)]
        assert count_trailing_passes(sessions) == 4


class TestCreateChild:

    def test_seeds_first_goal_per_category(self, store, child):
        assert set(child.progress) == {"F80.2", "H90"}
        assert child.progress["F80.2"] == {"G1": GoalProgress(sessions=[], passed=False, unlocked=True)}
        assert list(child.progress["H90"]) == ["H1"]

    def test_later_goals_absent(self, child):
        assert "G2" not in child.progress["F80.2"]
        assert "G3" not in child.progress["F80.2"]

    def test_id_and_timestamp(self, child):
        assert child.id == "id-1"
        assert child.created_at == NOW
        assert child.sessions == []

    def test_visible_in_store(self, store, child):
        assert [c.id for c in store.list_children()] == [child.id]
        assert store.has_child(child.id)

    def test_unique_ids(self, store):
        a = store.create_child(CHILD_FIELDS)
        b = store.create_child(CHILD_FIELDS)
        assert a.id != b.id

    def test_default_ids_unique(self, catalog):
        store = ProgressStore(catalog)
        ids = {store.create_child(CHILD_FIELDS).id for _ in range(20)}
        assert len(ids) == 20

    def test_blank_field_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create_child({**CHILD_FIELDS, "parent_name": "   "})
        assert store.list_children() == []

    def test_fields_stripped(self, store):
        child = store.create_child({**CHILD_FIELDS, "child_name": "  Mehak  "})
        assert child.child_name == "Mehak"

    def test_duplicate_generated_id_refused(self, catalog):
        store = ProgressStore(catalog, id_generator=lambda: "same")
        store.create_child(CHILD_FIELDS)
        with pytest.raises(InvariantViolation):
            store.create_child(CHILD_FIELDS)
        assert len(store.list_children()) == 1

    def test_returned_child_is_a_copy(self, store, child):
        child.progress["F80.2"]["G1"].passed = True
        assert store.get_child(child.id).progress["F80.2"]["G1"].passed is False


class TestLookup:

    def test_get_child_unknown(self, store):
        with pytest.raises(NotFoundError):
            store.get_child("nobody")

    def test_find_by_mr_number(self, store, child):
        store.create_child({**CHILD_FIELDS, "mr_number": "01-2000"})
        found = store.find_by_mr_number(" 01-1001 ")
        assert [c.id for c in found] == [child.id]

    def test_find_by_mr_number_no_match(self, store, child):
        assert store.find_by_mr_number("01-9999") == []


class TestRecordSession:

    def test_appends_outcome(self, store, child):
        progress = store.record_session(child.id, "F80.2", "G1", make_outcome(True))
        assert len(progress.sessions) == 1
        assert progress.passed is False

    def test_streak_passes_goal(self, record):
        progress = record([True, False, True, True, True])
        assert progress.passed is True

    def test_broken_streak_does_not_pass(self, record):
        progress = record([True, True, False, True, True])
        assert progress.passed is False

    def test_unknown_child(self, store):
        with pytest.raises(NotFoundError):
            store.record_session("nobody", "F80.2", "G1", make_outcome(True))

    def test_unknown_category(self, store, child):
        with pytest.raises(NotFoundError):
            store.record_session(child.id, "X00", "G1", make_outcome(True))

    def test_goal_outside_category(self, store, child):
        with pytest.raises(InvalidReferenceError):
            store.record_session(child.id, "H90", "G1", make_outcome(True))

    def test_future_outcome_rejected(self, store, child):
        before = store.get_child(child.id)
        with pytest.raises(IncompleteSessionError):
            store.record_session(child.id, "F80.2", "G1", make_outcome(True, day=-30))
        assert store.get_child(child.id) == before

    def test_later_same_day_outcome_accepted(self, store, child):
        outcome = make_outcome(True).model_copy(update={"date": NOW + timedelta(hours=3)})
        progress = store.record_session(child.id, "F80.2", "G1", outcome)
        assert progress.sessions[0].date == NOW + timedelta(hours=3)

    def test_failed_call_leaves_state(self, store, child):
        before = store.get_child(child.id)
        with pytest.raises(InvalidReferenceError):
            store.record_session(child.id, "F80.2", "H1", make_outcome(True))
        assert store.get_child(child.id) == before

    def test_session_log_entry(self, store, child):
        store.record_session(child.id, "F80.2", "G1", make_outcome(True, therapist="Dr. Usman"))
        log = store.get_child(child.id).sessions
        assert len(log) == 1
        entry = log[0]
        assert (entry.child_id, entry.category_id, entry.goal_id) == (child.id, "F80.2", "G1")
        assert entry.therapist_name == "Dr. Usman"
        assert entry.is_passed is True

    def test_log_ids_unique(self, record, store, child):
        record([True, False, True])
        ids = [s.id for s in store.get_child(child.id).sessions]
        assert len(set(ids)) == 3

    def test_missing_entry_created(self, store, child):
        # G3 is locked, but recording defensively opens an entry for it
        progress = store.record_session(child.id, "F80.2", "G3", make_outcome(False))
        assert progress.unlocked is True
        assert len(progress.sessions) == 1

    def test_returned_progress_is_a_copy(self, store, child):
        progress = store.record_session(child.id, "F80.2", "G1", make_outcome(True))
        progress.sessions.clear()
        assert len(store.get_child(child.id).progress["F80.2"]["G1"].sessions) == 1

    def test_custom_pass_streak(self, catalog, clock, ids):
        store = ProgressStore(catalog, clock=clock, id_generator=ids, pass_streak=2)
        child = store.create_child(CHILD_FIELDS)
        store.record_session(child.id, "F80.2", "G1", make_outcome(True))
        progress = store.record_session(child.id, "F80.2", "G1", make_outcome(True))
        assert progress.passed is True

    def test_invalid_pass_streak(self, catalog):
        with pytest.raises(ValueError):
            ProgressStore(catalog, pass_streak=0)


class TestUnlockChain:

    def test_passing_unlocks_next(self, record, store, child):
        record([True, True, True])
        progress = store.get_child(child.id).progress["F80.2"]
        assert progress["G1"].passed is True
        assert progress["G2"].unlocked is True
        assert progress["G2"].sessions == []
        assert "G3" not in progress

    def test_other_category_untouched(self, record, store, child):
        record([True, True, True])
        assert list(store.get_child(child.id).progress["H90"]) == ["H1"]

    def test_pass_is_terminal(self, record, store, child):
        record([True, True, True])
        progress = record([False, False, False])
        assert progress.passed is True
        assert len(progress.sessions) == 6

    def test_unlock_happens_once(self, record, store, child):
        record([True, True, True])
        record([True], goal_id="G2")
        before = store.get_child(child.id).progress["F80.2"]["G2"]
        record([True, True, True])
        after = store.get_child(child.id).progress["F80.2"]["G2"]
        assert after == before
        assert len(after.sessions) == 1

    def test_full_chain(self, record, store, child):
        record([True, True, True], goal_id="G1")
        record([True, True, True], goal_id="G2")
        progress = record([True, True, True], goal_id="G3")
        assert progress.passed is True
        goals = store.get_child(child.id).progress["F80.2"]
        assert list(goals) == ["G1", "G2", "G3"]
        assert all(g.passed for g in goals.values())

    def test_existing_locked_entry_gets_unlocked(self, store, child):
        snapshot = store.to_snapshot()
        snapshot["children"][0]["progress"]["F80.2"]["G2"] = {
            "sessions": [], "passed": False, "unlocked": False,
        }
        restored = ProgressStore.from_snapshot(snapshot, store.catalog)
        for _ in range(3):
            restored.record_session(child.id, "F80.2", "G1", make_outcome(True))
        assert restored.get_child(child.id).progress["F80.2"]["G2"].unlocked is True


class TestSnapshot:

    def test_round_trip(self, record, store, child, catalog):
        record([True, False, True, True, True])
        data = store.to_snapshot()
        restored = ProgressStore.from_snapshot(data, catalog)
        assert restored.get_child(child.id) == store.get_child(child.id)

    def test_snapshot_is_plain(self, record, store):
        record([True])
        data = store.to_snapshot()
        child = data["children"][0]
        assert isinstance(child["created_at"], str)
        assert isinstance(child["sessions"][0]["date"], str)

    def test_unknown_goal_rejected(self, store, child, catalog):
        data = store.to_snapshot()
        data["children"][0]["progress"]["F80.2"]["ZZ"] = {"sessions": [], "passed": False, "unlocked": True}
        with pytest.raises(InvalidReferenceError):
            ProgressStore.from_snapshot(data, catalog)

    def test_duplicate_child_id_rejected(self, store, child, catalog):
        data = store.to_snapshot()
        copy = dict(data["children"][0], child_name="Someone Else")
        data["children"].append(copy)
        with pytest.raises(InvariantViolation):
            ProgressStore.from_snapshot(data, catalog)


class TestConcurrency:

    def test_parallel_sessions_all_recorded(self, store, child):
        def worker():
            for _ in range(25):
                store.record_session(child.id, "H90", "H1", make_outcome(False))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        saved = store.get_child(child.id)
        assert len(saved.sessions) == 100
        assert len(saved.progress["H90"]["H1"].sessions) == 100
