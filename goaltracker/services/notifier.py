"""Change notification for goal mutations.

Services publish a snapshot after every write; subscribers (UI push,
cache refresh, logging) get events in subscription order.
"""
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class GoalChangeKind(str, Enum):
    """What happened to the goal."""

    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"
    DELETED = "deleted"


@dataclass(frozen=True)
class GoalChangeEvent:
    """A goal mutation, with the post-write snapshot (None once deleted)."""

    kind: GoalChangeKind
    user_id: str
    goal_id: str
    goal: Optional[Any] = None


Subscriber = Callable[[GoalChangeEvent], Any]


class GoalChangeNotifier:
    """Fan-out of goal change events to sync or async callbacks."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback.

        Returns:
            Function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def publish(self, event: GoalChangeEvent) -> None:
        """Deliver ``event`` to every subscriber; errors propagate to the caller."""
        for callback in list(self._subscribers):
            result = callback(event)
            if inspect.isawaitable(result):
                await result


# Global notifier instance
notifier = GoalChangeNotifier()
