"""Tests for today's agenda filter."""
from datetime import date

from goaltracker.core.agenda import select_due, todays_agenda

TUESDAY = date(2024, 5, 14)


class TestSelectDue:
    """Tests for select_due."""

    def test_custom_goal_excluded_on_tuesday(self, make_goal):
        mwf = make_goal(title="Gym", frequency="custom", custom_days=["monday", "wednesday", "friday"])
        daily = make_goal(title="Read", frequency="daily")

        due = select_due([mwf, daily], TUESDAY)

        assert [goal.title for goal in due] == ["Read"]

    def test_preserves_input_order(self, make_goal):
        goals = [
            make_goal(title="C", frequency="weekdays"),
            make_goal(title="A", frequency="daily"),
            make_goal(title="B", frequency="weekends"),
            make_goal(title="D", frequency="custom", custom_days=["tuesday"]),
        ]

        due = select_due(goals, TUESDAY)

        assert [goal.title for goal in due] == ["C", "A", "D"]

    def test_corrupt_rules_are_skipped_not_fatal(self, make_goal):
        goals = [
            make_goal(title="bad", frequency="fortnightly"),
            make_goal(title="empty", frequency="custom", custom_days=[]),
            make_goal(title="ok", frequency="daily"),
        ]

        assert [goal.title for goal in select_due(goals, TUESDAY)] == ["ok"]

    def test_empty_input(self):
        assert select_due([], TUESDAY) == []


class TestTodaysAgenda:
    """Tests for todays_agenda."""

    def test_completed_flag_rederived(self, make_goal):
        stale = make_goal(title="stale", completed=True, completion_history=["2024-05-13"])
        done = make_goal(title="done", completed=False, completion_history=["2024-05-14"])

        agenda = todays_agenda([stale, done], TUESDAY)

        assert [(goal.title, goal.completed) for goal in agenda] == [("stale", False), ("done", True)]
