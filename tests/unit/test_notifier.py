"""Tests for GoalChangeNotifier."""
import pytest

from goaltracker.services.notifier import GoalChangeEvent, GoalChangeKind, GoalChangeNotifier


def make_event(goal_id="g1"):
    return GoalChangeEvent(GoalChangeKind.UPDATED, "user123", goal_id)


@pytest.mark.asyncio
class TestNotifier:
    """Tests for subscribe/publish."""

    async def test_sync_and_async_subscribers(self):
        notifier = GoalChangeNotifier()
        received = []

        def sync_callback(event):
            received.append(("sync", event.goal_id))

        async def async_callback(event):
            received.append(("async", event.goal_id))

        notifier.subscribe(sync_callback)
        notifier.subscribe(async_callback)
        await notifier.publish(make_event())

        assert received == [("sync", "g1"), ("async", "g1")]

    async def test_unsubscribe(self):
        notifier = GoalChangeNotifier()
        received = []

        unsubscribe = notifier.subscribe(received.append)
        await notifier.publish(make_event("a"))
        unsubscribe()
        unsubscribe()
        await notifier.publish(make_event("b"))

        assert [event.goal_id for event in received] == ["a"]

    async def test_subscriber_errors_propagate(self):
        notifier = GoalChangeNotifier()

        def broken(event):
            raise RuntimeError("boom")

        notifier.subscribe(broken)

        with pytest.raises(RuntimeError, match="boom"):
            await notifier.publish(make_event())
