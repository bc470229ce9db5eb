"""Date-only helpers.

Every comparison in the tracker happens on calendar days. These helpers
strip time-of-day at the storage boundary and give one canonical string
form (``YYYY-MM-DD``) for ledger entries.
"""
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Normalize a date, datetime or ISO string to a date.

    Examples:
        >>> to_date(datetime(2024, 5, 10, 23, 59))
        datetime.date(2024, 5, 10)
        >>> to_date("2024-05-10")
        datetime.date(2024, 5, 10)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def to_optional_date(value: Optional[DateLike]) -> Optional[date]:
    """Like to_date, but passes None through."""
    if value is None:
        return None
    return to_date(value)


def date_key(value: DateLike) -> str:
    """Canonical ``YYYY-MM-DD`` key for a calendar day."""
    return to_date(value).isoformat()


def to_storage(value: Optional[date]) -> Optional[datetime]:
    """Store a date as midnight datetime (BSON has no date-only type)."""
    if value is None:
        return None
    return datetime.combine(value, datetime.min.time())
