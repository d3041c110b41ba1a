"""speechtrack utilities."""

from .clock import Clock, SystemClock, IdGenerator, uuid_ids, as_utc, local_today, is_future_day
from .goal_bank import load_goal_bank, parse_categories, get_available_goal_banks, DEFAULT_GOAL_BANK
from .snapshot import save_snapshot, load_snapshot, SNAPSHOT_VERSION

__all__ = [
    "Clock",
    "SystemClock",
    "IdGenerator",
    "uuid_ids",
    "as_utc",
    "local_today",
    "is_future_day",
    "load_goal_bank",
    "parse_categories",
    "get_available_goal_banks",
    "DEFAULT_GOAL_BANK",
    "save_snapshot",
    "load_snapshot",
    "SNAPSHOT_VERSION",
]
