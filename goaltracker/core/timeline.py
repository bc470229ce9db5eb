"""Seven-day timeline strip: two days back, today, four days ahead."""
from datetime import date, timedelta

from goaltracker.core.ledger import CompletionLedger
from goaltracker.core.recurrence import is_due_on
from goaltracker.models.timeline import DayView

DAYS_BACK = 2
DAYS_AHEAD = 4

SHORT_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def build_window(goal, today: date) -> list[DayView]:
    """
    Build the timeline for ``goal`` around ``today``.

    Past days and today read completion from the ledger. Future days are
    never completed, whatever the ledger says. Only past days and today
    are selectable.
    """
    ledger = CompletionLedger(goal.completion_history)
    window = []

    for offset in range(-DAYS_BACK, DAYS_AHEAD + 1):
        day = today + timedelta(days=offset)
        is_past = offset < 0
        is_today = offset == 0
        window.append(
            DayView(
                date=day,
                day_name=SHORT_DAY_NAMES[day.weekday()],
                day_number=day.day,
                is_past=is_past,
                is_today=is_today,
                is_due=is_due_on(goal, day),
                is_completed=(is_past or is_today) and ledger.contains(day),
                is_selectable=is_past or is_today,
            )
        )

    return window
