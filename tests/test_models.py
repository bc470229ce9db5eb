"""Tests for Pydantic models."""
import pytest
from datetime import date, datetime
from pydantic import ValidationError


class TestMicroGoalCreateModel:
    """Tests for MicroGoalCreate."""

    def test_defaults(self):
        from goaltracker.models.micro_goal import Frequency, MicroGoalCreate

        goal = MicroGoalCreate(title="Meditate", macro_goal_id="abc")

        assert goal.frequency == Frequency.DAILY
        assert goal.custom_days == []
        assert goal.xp_value is None

    def test_custom_requires_days(self):
        from goaltracker.models.micro_goal import MicroGoalCreate

        with pytest.raises(ValidationError, match="at least one day"):
            MicroGoalCreate(title="Gym", macro_goal_id="abc", frequency="custom")

    def test_custom_days_deduplicated_and_ordered(self):
        from goaltracker.models.micro_goal import MicroGoalCreate, Weekday

        goal = MicroGoalCreate(
            title="Gym",
            macro_goal_id="abc",
            frequency="custom",
            custom_days=["friday", "monday", "friday", "wednesday"],
        )

        assert goal.custom_days == [Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY]

    def test_custom_days_dropped_for_other_frequencies(self):
        from goaltracker.models.micro_goal import MicroGoalCreate

        goal = MicroGoalCreate(
            title="Walk",
            macro_goal_id="abc",
            frequency="weekdays",
            custom_days=["monday"],
        )

        assert goal.custom_days == []

    def test_invalid_frequency_rejected(self):
        from goaltracker.models.micro_goal import MicroGoalCreate

        with pytest.raises(ValidationError):
            MicroGoalCreate(title="Walk", macro_goal_id="abc", frequency="hourly")

    def test_invalid_weekday_rejected(self):
        from goaltracker.models.micro_goal import MicroGoalCreate

        with pytest.raises(ValidationError):
            MicroGoalCreate(title="Walk", macro_goal_id="abc", frequency="custom", custom_days=["funday"])

    def test_xp_must_be_positive(self):
        from goaltracker.models.micro_goal import MicroGoalCreate

        with pytest.raises(ValidationError):
            MicroGoalCreate(title="Walk", macro_goal_id="abc", xp_value=0)


class TestMicroGoalUpdateModel:
    """Tests for MicroGoalUpdate."""

    def test_all_optional(self):
        from goaltracker.models.micro_goal import MicroGoalUpdate

        update = MicroGoalUpdate()
        assert update.model_dump(exclude_none=True) == {}

    def test_custom_with_empty_days_rejected(self):
        from goaltracker.models.micro_goal import MicroGoalUpdate

        with pytest.raises(ValidationError):
            MicroGoalUpdate(frequency="custom", custom_days=[])


class TestMicroGoalModel:
    """Tests for the stored MicroGoal model."""

    def test_corrupt_rule_is_accepted(self):
        """Stored records are read as-is; the agenda decides what is due."""
        from goaltracker.models.micro_goal import MicroGoal

        goal = MicroGoal(
            _id="g1",
            user_id="u1",
            macro_goal_id="m1",
            title="Old habit",
            xp_value=10,
            frequency="every-other-tuesday",
            created_at=datetime(2024, 5, 1),
            updated_at=datetime(2024, 5, 1),
        )

        assert goal.frequency == "every-other-tuesday"
        assert goal.streak == 0
        assert goal.last_completed is None
        assert goal.completion_history == []

    def test_mistyped_rule_fields_coerced(self, make_goal):
        from goaltracker.models.micro_goal import Frequency

        assert make_goal(frequency=42).frequency == ""
        assert make_goal(frequency=None).frequency == ""
        assert make_goal(frequency=Frequency.WEEKENDS).frequency == "weekends"
        assert make_goal(custom_days="monday").custom_days == []
        assert make_goal(custom_days=None).custom_days == []
        assert make_goal(custom_days=[None, "monday", 7]).custom_days == ["monday"]

    def test_serializes_id(self, make_goal):
        goal = make_goal(_id="g1", last_completed=date(2024, 5, 10))

        data = goal.model_dump(by_alias=True, mode="json")

        assert data["id"] == "g1"
        assert data["last_completed"] == "2024-05-10"


class TestMacroGoalModel:
    """Tests for MacroGoal."""

    def test_progress_computed(self):
        from goaltracker.models.macro_goal import MacroGoal

        goal = MacroGoal(
            _id="m1",
            user_id="u1",
            title="Get fit",
            total_xp=250,
            target_xp=1000,
            created_at=datetime(2024, 5, 1),
            updated_at=datetime(2024, 5, 1),
        )

        assert goal.progress == 0.25
        assert goal.model_dump()["progress"] == 0.25
        assert goal.is_anti_goal is False

    def test_create_defaults(self):
        from goaltracker.models.macro_goal import MacroGoalCreate

        goal = MacroGoalCreate(title="Stop doomscrolling", is_anti_goal=True)

        assert goal.is_anti_goal is True
        assert goal.target_xp is None
        assert goal.description == ""


class TestDayViewModel:
    """Tests for DayView."""

    def test_fields(self):
        from goaltracker.models.timeline import DayView

        day = DayView(
            date=date(2024, 5, 11),
            day_name="Sat",
            day_number=11,
            is_past=False,
            is_today=True,
            is_due=True,
            is_completed=False,
            is_selectable=True,
        )

        assert day.model_dump(mode="json")["date"] == "2024-05-11"
