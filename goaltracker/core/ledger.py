"""Completion ledger: the set of calendar days a habit was marked done."""
from datetime import date
from typing import Iterable, Iterator, Optional

from goaltracker.utils.dates import DateLike, date_key


def _key(day: DateLike) -> str:
    # Stored entries are compared as strings; only date objects get formatted.
    if isinstance(day, date):
        return date_key(day)
    return str(day)


class CompletionLedger:
    """
    Set of ``YYYY-MM-DD`` strings with idempotent add/remove.

    Storage order carries no meaning. Anything needing chronology goes
    through ``sorted_dates``.
    """

    def __init__(self, entries: Optional[Iterable[DateLike]] = None):
        self._days: set[str] = {_key(entry) for entry in entries or ()}

    def contains(self, day: DateLike) -> bool:
        return _key(day) in self._days

    __contains__ = contains

    def add(self, day: DateLike) -> None:
        self._days.add(_key(day))

    def remove(self, day: DateLike) -> None:
        self._days.discard(_key(day))

    def __len__(self) -> int:
        return len(self._days)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._days))

    def __eq__(self, other) -> bool:
        if not isinstance(other, CompletionLedger):
            return NotImplemented
        return self._days == other._days

    def sorted_dates(self) -> list[date]:
        """Chronological list of entries; unparseable strings are skipped."""
        days = []
        for entry in self._days:
            try:
                days.append(date.fromisoformat(entry))
            except ValueError:
                continue
        return sorted(days)

    def latest_before(self, day: date) -> Optional[date]:
        """Most recent completion strictly before ``day``, if any."""
        earlier = [d for d in self.sorted_dates() if d < day]
        return earlier[-1] if earlier else None

    def to_list(self) -> list[str]:
        """Entries in a stable (sorted) order for storage."""
        return sorted(self._days)
