"""Timeline view model."""
from datetime import date

from pydantic import BaseModel


class DayView(BaseModel):
    """One day of a habit's timeline strip."""

    date: date
    day_name: str  # Mon, Tue, ...
    day_number: int
    is_past: bool
    is_today: bool
    is_due: bool
    is_completed: bool
    is_selectable: bool
