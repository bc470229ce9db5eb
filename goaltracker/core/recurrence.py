"""Recurrence rules: is a habit due on a given calendar day?"""
from datetime import date

from goaltracker.models.micro_goal import Frequency
from goaltracker.utils.dates import to_date

# Indexed by date.weekday(): Monday == 0
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def weekday_name(day: date) -> str:
    """Lowercase English weekday name of a calendar day."""
    return WEEKDAY_NAMES[to_date(day).weekday()]


def _custom_day_set(custom_days) -> set[str]:
    if not custom_days:
        return set()
    return {d.lower() for d in custom_days if isinstance(d, str)}


def is_due_on(goal, day: date) -> bool:
    """
    Decide whether a habit is due on ``day``.

    Works on anything with ``frequency`` and ``custom_days`` attributes.
    Never raises: an unknown frequency, or a custom rule without days,
    means the habit is never due.

    Examples:
        >>> from types import SimpleNamespace
        >>> goal = SimpleNamespace(frequency="custom", custom_days=["monday"])
        >>> is_due_on(goal, date(2024, 5, 13))
        True
        >>> is_due_on(goal, date(2024, 5, 14))
        False
    """
    frequency = getattr(goal, "frequency", None)
    day = to_date(day)
    weekday = day.weekday()

    if frequency == Frequency.DAILY:
        return True
    if frequency == Frequency.WEEKDAYS:
        return weekday < 5
    if frequency == Frequency.WEEKENDS:
        return weekday >= 5
    if frequency == Frequency.CUSTOM:
        return WEEKDAY_NAMES[weekday] in _custom_day_set(getattr(goal, "custom_days", None))
    return False
