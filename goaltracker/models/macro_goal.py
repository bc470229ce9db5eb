"""Macro goal model definitions (outcome-level goals and anti-goals)."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, NonNegativeInt, computed_field

from goaltracker.core.xp import progress_ratio


class MacroGoalBase(BaseModel):
    """Base macro goal fields."""

    title: str = Field(min_length=1)
    description: str = ""
    color: str = "#f4511e"
    is_anti_goal: bool = False


class MacroGoalCreate(MacroGoalBase):
    """Macro goal creation model."""

    target_xp: Optional[NonNegativeInt] = None


class MacroGoalUpdate(BaseModel):
    """Macro goal update model - all fields optional."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    target_xp: Optional[NonNegativeInt] = None


class MacroGoal(MacroGoalBase):
    """Full macro goal model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    total_xp: int = 0
    target_xp: int
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @computed_field
    @property
    def progress(self) -> float:
        return progress_ratio(self.total_xp, self.target_xp)
