"""
Time and id collaborators.

The tracker never reads the wall clock or generates ids directly; both are
injected so tests can pin them.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Callable, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


IdGenerator = Callable[[], str]


def uuid_ids() -> str:
    """Random UUID4 hex; no collisions within a clock tick."""
    return uuid.uuid4().hex


def as_utc(value: datetime | date) -> datetime:
    """
    Coerce a session date to an aware UTC datetime for storage.

    Plain dates keep their calendar day (midnight UTC). Naive datetimes are
    local wall-clock time, as returned by ``datetime.now()``.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_today(now: datetime) -> date:
    """Calendar day of ``now`` on the local wall clock."""
    return now.astimezone().date()


def is_future_day(value: datetime | date, now: datetime) -> bool:
    """
    True if ``value`` falls after today, both in now's timezone and on the
    local wall clock.

    Naive datetimes are local time. A plain date is the same calendar day
    in either frame. A value that passes here still passes after
    ``as_utc``, so the store can repeat the check on stored outcomes.
    """
    if now.tzinfo is None:
        now = now.astimezone()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.astimezone()
        clock_day = value.astimezone(now.tzinfo).date()
        local_day = value.astimezone().date()
    else:
        clock_day = local_day = value
    return clock_day > now.date() and local_day > local_today(now)
