"""Clock collaborator: supplies "today" as a local calendar day."""
from datetime import date, datetime, tzinfo
from typing import Callable, Optional


class Clock:
    """
    Source of the current calendar day in a fixed timezone.

    Pure code never reads the wall clock; it is handed ``clock.today()``.
    """

    def __init__(self, tz: tzinfo, now: Optional[Callable[[], datetime]] = None):
        self.tz = tz
        self._now = now

    def today(self) -> date:
        if self._now is None:
            return datetime.now(self.tz).date()
        current = self._now()
        if current.tzinfo is not None:
            current = current.astimezone(self.tz)
        return current.date()
