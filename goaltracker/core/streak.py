"""Streak engine.

Marking a habit done or undone for today changes four fields together:
``streak``, ``last_completed``, ``completion_history`` and ``completed``.
``apply_completion`` builds the whole next record without touching the
input; the caller persists it with a single write.

Streaks count consecutive calendar days, not consecutive due days: a
weekdays-only habit done on Friday and then Monday starts over at 1.
"""
from datetime import date, timedelta

from goaltracker.core.ledger import CompletionLedger
from goaltracker.models.micro_goal import MicroGoal


def apply_completion(
    goal: MicroGoal,
    completed: bool,
    today: date,
    restore_last_completed: bool = True,
) -> MicroGoal:
    """
    Return a copy of ``goal`` with today's occurrence marked done or undone.

    Marking done:
        - first completion ever: streak 1
        - last completed yesterday: streak + 1
        - last completed today: unchanged (re-mark is a no-op)
        - anything else, including a future date from clock skew: streak 1

    Marking undone:
        - if last completed today, streak - 1 (never below 0)
        - with ``restore_last_completed``, ``last_completed`` falls back to
          the latest ledger entry before today; otherwise it keeps its
          stored value

    Args:
        goal: Current record
        completed: True to mark done, False to undo
        today: Calendar day in the user's local time
        restore_last_completed: Recompute last_completed on undo

    Returns:
        New MicroGoal; ``completed`` is always ``today in history``
    """
    ledger = CompletionLedger(goal.completion_history)
    streak = max(goal.streak or 0, 0)
    last_completed = goal.last_completed
    yesterday = today - timedelta(days=1)

    if completed:
        if last_completed is None:
            streak = 1
        elif last_completed == yesterday:
            streak += 1
        elif last_completed != today:
            streak = 1
        last_completed = today
        ledger.add(today)
    else:
        if last_completed == today:
            if streak > 0:
                streak -= 1
            if restore_last_completed:
                last_completed = ledger.latest_before(today)
        ledger.remove(today)

    return goal.model_copy(
        update={
            "streak": streak,
            "last_completed": last_completed,
            "completion_history": ledger.to_list(),
            "completed": ledger.contains(today),
        }
    )


def sync_completed_flag(goal: MicroGoal, today: date) -> MicroGoal:
    """Re-derive the denormalized ``completed`` flag for ``today``."""
    completed = CompletionLedger(goal.completion_history).contains(today)
    if completed == goal.completed:
        return goal
    return goal.model_copy(update={"completed": completed})


def current_streak(goal: MicroGoal, today: date) -> int:
    """Stored streak if it is still alive (done today or yesterday), else 0."""
    last_completed = goal.last_completed
    if last_completed is None:
        return 0
    if last_completed in (today, today - timedelta(days=1)):
        return max(goal.streak, 0)
    return 0


def longest_streak(ledger: CompletionLedger) -> int:
    """Longest run of consecutive calendar days in the ledger."""
    longest = 0
    run = 0
    previous = None
    for day in ledger.sorted_dates():
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest
