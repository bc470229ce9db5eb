"""Micro goal (habit) model definitions."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator, model_validator


class Frequency(str, Enum):
    """Recurrence rules a habit can follow."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    CUSTOM = "custom"


class Weekday(str, Enum):
    """Lowercase English weekday names, Monday first (matches date.weekday())."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


WEEKDAY_ORDER = list(Weekday)


def _ordered_days(days: list[Weekday]) -> list[Weekday]:
    """Drop duplicates and sort Monday..Sunday."""
    return sorted(set(days), key=WEEKDAY_ORDER.index)


class MicroGoalCreate(BaseModel):
    """Micro goal creation model."""

    title: str = Field(min_length=1)
    macro_goal_id: str
    xp_value: Optional[PositiveInt] = None
    frequency: Frequency = Frequency.DAILY
    custom_days: list[Weekday] = []

    @model_validator(mode="after")
    def check_custom_days(self):
        if self.frequency == Frequency.CUSTOM:
            if not self.custom_days:
                raise ValueError("Select at least one day for a custom schedule")
            self.custom_days = _ordered_days(self.custom_days)
        else:
            self.custom_days = []
        return self


class MicroGoalUpdate(BaseModel):
    """Micro goal update model - all fields optional."""

    title: Optional[str] = Field(default=None, min_length=1)
    macro_goal_id: Optional[str] = None
    xp_value: Optional[PositiveInt] = None
    frequency: Optional[Frequency] = None
    custom_days: Optional[list[Weekday]] = None
    is_archived: Optional[bool] = None

    @model_validator(mode="after")
    def check_custom_days(self):
        if self.custom_days is not None:
            if self.frequency == Frequency.CUSTOM and not self.custom_days:
                raise ValueError("Select at least one day for a custom schedule")
            self.custom_days = _ordered_days(self.custom_days)
        return self


class CompletionToggle(BaseModel):
    """Request body for marking today's occurrence done or undone."""

    completed: bool


class MicroGoal(BaseModel):
    """
    Full micro goal model with database fields.

    ``frequency`` and ``custom_days`` are plain strings here: stored records
    are read as-is so that a corrupt rule degrades to "never due" instead
    of failing validation. Values of the wrong type are coerced to an empty
    rule and non-string day entries are dropped.
    """

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    macro_goal_id: str
    title: str
    xp_value: int
    frequency: str = Frequency.DAILY.value
    custom_days: list[str] = []
    streak: int = 0
    last_completed: Optional[date] = None
    completion_history: list[str] = []
    completed: bool = False
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @field_validator("frequency", mode="before")
    @classmethod
    def coerce_frequency(cls, value):
        if isinstance(value, Enum):
            value = value.value
        return value if isinstance(value, str) else ""

    @field_validator("custom_days", mode="before")
    @classmethod
    def coerce_custom_days(cls, value):
        if not isinstance(value, list):
            return []
        days = [day.value if isinstance(day, Enum) else day for day in value]
        return [day for day in days if isinstance(day, str)]


class MicroGoalStats(BaseModel):
    """Streak figures for one habit as of a given day."""

    goal_id: str
    as_of: date
    streak: int
    current_streak: int
    longest_streak: int
    total_completions: int
