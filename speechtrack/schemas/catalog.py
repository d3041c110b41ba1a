"""
Goal catalog schemas for speechtrack.

Defines Pydantic models for the static goal bank:
- Goal: a single measurable therapy target
- Category: an ordered list of goals for one disorder area (e.g. F80.2)
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Goal(BaseModel):
    """A therapy goal. Its position inside the category is its unlock order."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)     # e.g. "RL.01"
    title: str = Field(..., min_length=1)


class Category(BaseModel):
    """A disorder category with goals in unlock order."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)     # ICD code, e.g. "F80.2"
    title: str
    goals: list[Goal] = Field(..., min_length=1)

    @field_validator('goals')
    @classmethod
    def goal_ids_unique(cls, v):
        seen = set()
        for goal in v:
            if goal.id in seen:
                raise ValueError(f'Duplicate goal id in category: {goal.id}')
            seen.add(goal.id)
        return v

    @property
    def first_goal(self) -> Goal:
        return self.goals[0]

    @property
    def goal_ids(self) -> list[str]:
        return [g.id for g in self.goals]
