"""Today's agenda: the habits due on a given day."""
from datetime import date
from typing import Sequence

from goaltracker.core.recurrence import is_due_on
from goaltracker.core.streak import sync_completed_flag


def select_due(goals: Sequence, today: date) -> list:
    """Keep the goals due on ``today``, in their original order."""
    return [goal for goal in goals if is_due_on(goal, today)]


def todays_agenda(goals: Sequence, today: date) -> list:
    """Due goals with ``completed`` re-derived from each ledger for ``today``."""
    return [sync_completed_flag(goal, today) for goal in select_due(goals, today)]
