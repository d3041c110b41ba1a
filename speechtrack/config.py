# speechtrack configuration
# reads tracker tuning and goal bank location from env vars (.env supported)

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    # goal bank yaml (None = bundled file)
    goal_bank_path: Optional[Path] = None

    # a goal passes after this many consecutive passed sessions
    pass_streak: int = 3

    # checklist size for a session
    activities_per_session: int = 5

    # level gate
    level_size: int = 5
    level_unlock_percent: int = 60

    # scripts only
    log_level: str = "INFO"

    def __post_init__(self):
        if self.pass_streak < 1:
            raise ValueError("pass_streak must be at least 1")
        if self.activities_per_session < 1:
            raise ValueError("activities_per_session must be at least 1")
        if self.level_size < 1:
            raise ValueError("level_size must be at least 1")
        if not 0 <= self.level_unlock_percent <= 100:
            raise ValueError("level_unlock_percent must be between 0 and 100")


def get_settings() -> Settings:
    """Build settings from the current environment."""
    goal_bank = os.getenv("SPEECHTRACK_GOAL_BANK")
    return Settings(
        goal_bank_path=Path(goal_bank) if goal_bank else None,
        pass_streak=int(os.getenv("SPEECHTRACK_PASS_STREAK", "3")),
        activities_per_session=int(os.getenv("SPEECHTRACK_ACTIVITIES_PER_SESSION", "5")),
        level_size=int(os.getenv("SPEECHTRACK_LEVEL_SIZE", "5")),
        level_unlock_percent=int(os.getenv("SPEECHTRACK_LEVEL_UNLOCK_PERCENT", "60")),
        log_level=os.getenv("SPEECHTRACK_LOG_LEVEL", "INFO").upper(),
    )
