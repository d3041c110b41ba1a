"""
Progress tracking schemas for speechtrack.

Defines Pydantic models for per-child state including:
- Session outcomes (goal-scoped) and session records (child-scoped log)
- Goal progress with pass/unlock flags
- Child records with demographics, progress map and session log
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def require_text(v: str) -> str:
    """Shared non-empty string check: strips and rejects blanks."""
    v = v.strip()
    if not v:
        raise ValueError('Value must not be blank')
    return v


# -----------------------------------------------------------------------------
# Sessions
# -----------------------------------------------------------------------------

class SessionOutcome(BaseModel):
    """Result of one therapy session for a single goal. Never mutated."""
    model_config = ConfigDict(frozen=True)

    is_passed: bool
    date: datetime
    activities_passed: int = Field(..., ge=0)
    activities_total: int = Field(..., ge=1)
    therapist_name: str

    @field_validator('therapist_name')
    @classmethod
    def therapist_named(cls, v):
        return require_text(v)

    @model_validator(mode='after')
    def passed_within_total(self):
        if self.activities_passed > self.activities_total:
            raise ValueError('activities_passed cannot exceed activities_total')
        return self


class SessionRecord(SessionOutcome):
    """Entry in a child's global session log (audit trail for reports)."""
    id: str
    child_id: str
    category_id: str
    goal_id: str

    @classmethod
    def from_outcome(cls, outcome: SessionOutcome, *, record_id: str,
                     child_id: str, category_id: str, goal_id: str) -> "SessionRecord":
        return cls(
            id=record_id,
            child_id=child_id,
            category_id=category_id,
            goal_id=goal_id,
            **outcome.model_dump(include=set(SessionOutcome.model_fields)),
        )


# -----------------------------------------------------------------------------
# Goal progress
# -----------------------------------------------------------------------------

class GoalProgress(BaseModel):
    sessions: list[SessionOutcome] = []
    passed: bool = False
    unlocked: bool = True


# -----------------------------------------------------------------------------
# Children
# -----------------------------------------------------------------------------

class ChildFields(BaseModel):
    """Demographics captured by the add-child form. Opaque to the tracker."""
    child_name: str
    mr_number: str
    dob: str
    gender: str
    parent_name: str

    @field_validator('child_name', 'mr_number', 'dob', 'gender', 'parent_name')
    @classmethod
    def not_blank(cls, v):
        return require_text(v)


class Child(ChildFields):
    id: str
    created_at: datetime
    progress: dict[str, dict[str, GoalProgress]] = {}  # category_id -> goal_id -> progress
    sessions: list[SessionRecord] = []
