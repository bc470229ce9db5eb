"""Micro goal service - habit persistence, completion toggling and views."""
import logging
from datetime import date, datetime
from typing import Optional

from pymongo import ReturnDocument

from goaltracker.config import settings
from goaltracker.core.agenda import todays_agenda
from goaltracker.core.ledger import CompletionLedger
from goaltracker.core.streak import apply_completion, current_streak, longest_streak
from goaltracker.core.timeline import build_window
from goaltracker.core.xp import completion_xp
from goaltracker.errors import GoalLimitError, GoalNotFoundError, PersistenceError
from goaltracker.models.micro_goal import (
    Frequency,
    MicroGoal,
    MicroGoalCreate,
    MicroGoalStats,
    MicroGoalUpdate,
)
from goaltracker.models.timeline import DayView
from goaltracker.services.macro_goal_service import MacroGoalService, parse_goal_id
from goaltracker.services.notifier import GoalChangeEvent, GoalChangeKind, GoalChangeNotifier
from goaltracker.utils.dates import date_key, to_optional_date, to_storage

logger = logging.getLogger(__name__)


class MicroGoalService:
    """Service for handling micro goal (habit) operations."""

    def __init__(
        self,
        db,
        notifier: Optional[GoalChangeNotifier] = None,
        restore_last_completed: Optional[bool] = None,
    ):
        """Initialize service with database connection."""
        self.db = db
        self.micro_goals = db["micro_goals"]
        self.macro_goals = db["macro_goals"]
        self.notifier = notifier
        if restore_last_completed is None:
            restore_last_completed = settings.restore_last_completed_on_undo
        self.restore_last_completed = restore_last_completed

    def _doc_to_goal(self, doc: dict) -> MicroGoal:
        """
        Convert database document to MicroGoal model.

        Handles datetime to date conversion for ``last_completed``. Missing
        streak fields (records created before completion tracking) read as a
        fresh habit. A missing or mistyped recurrence rule is passed through
        and reads as never due.
        """
        return MicroGoal(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            macro_goal_id=doc["macro_goal_id"],
            title=doc["title"],
            xp_value=doc.get("xp_value", settings.default_xp_value),
            frequency=doc.get("frequency", ""),
            custom_days=doc.get("custom_days", []),
            streak=doc.get("streak") or 0,
            last_completed=to_optional_date(doc.get("last_completed")),
            completion_history=[
                date_key(day) if isinstance(day, date) else str(day)
                for day in doc.get("completion_history") or []
            ],
            completed=doc.get("completed", False),
            is_archived=doc.get("is_archived", False),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def _goal_to_doc(self, goal: MicroGoal) -> dict:
        """Full document for a whole-record write (no ``_id``)."""
        return {
            "user_id": goal.user_id,
            "macro_goal_id": goal.macro_goal_id,
            "title": goal.title,
            "xp_value": goal.xp_value,
            "frequency": goal.frequency,
            "custom_days": list(goal.custom_days),
            "streak": goal.streak,
            "last_completed": to_storage(goal.last_completed),
            "completion_history": list(goal.completion_history),
            "completed": goal.completed,
            "is_archived": goal.is_archived,
            "created_at": goal.created_at,
            "updated_at": goal.updated_at,
        }

    async def _publish(self, kind: GoalChangeKind, user_id: str, goal_id: str, goal=None):
        if self.notifier is not None:
            await self.notifier.publish(GoalChangeEvent(kind, user_id, goal_id, goal))

    async def _require_macro_goal(self, user_id: str, macro_goal_id: str) -> None:
        macro_goal = await self.macro_goals.find_one({
            "_id": parse_goal_id(macro_goal_id, "Macro goal"),
            "user_id": user_id,
        })
        if not macro_goal:
            raise GoalNotFoundError("Macro goal not found")

    # Persistence collaborator

    async def fetch_goal(self, user_id: str, goal_id: str) -> MicroGoal:
        """
        Read one habit.

        Raises:
            GoalNotFoundError: If goal not found or id is malformed
        """
        goal_doc = await self.micro_goals.find_one({
            "_id": parse_goal_id(goal_id),
            "user_id": user_id,
        })

        if not goal_doc:
            raise GoalNotFoundError("Goal not found")

        return self._doc_to_goal(goal_doc)

    async def save_goal(self, user_id: str, goal: MicroGoal) -> MicroGoal:
        """
        Write the whole record in one operation (last writer wins).

        Returns:
            The saved goal with its new ``updated_at``

        Raises:
            PersistenceError: If the record no longer exists
        """
        saved = goal.model_copy(update={"updated_at": datetime.utcnow()})

        result = await self.micro_goals.replace_one(
            {"_id": parse_goal_id(goal.id), "user_id": user_id},
            self._goal_to_doc(saved),
        )

        if result.matched_count == 0:
            logger.warning("Write for micro goal %s matched no document", goal.id)
            raise PersistenceError("Goal was not saved")

        return saved

    async def list_goals_for_user(
        self,
        user_id: str,
        macro_goal_id: Optional[str] = None,
        include_archived: bool = True,
    ) -> list[MicroGoal]:
        """
        List a user's habits in storage order.

        Args:
            user_id: User ID
            macro_goal_id: Optional owning macro goal filter
            include_archived: Whether archived habits are returned
        """
        query = {"user_id": user_id}
        if macro_goal_id:
            query["macro_goal_id"] = macro_goal_id
        if not include_archived:
            query["is_archived"] = False

        cursor = self.micro_goals.find(query)
        goal_docs = await cursor.to_list(length=None)

        return [self._doc_to_goal(doc) for doc in goal_docs]

    # CRUD

    async def create_micro_goal(
        self,
        user_id: str,
        goal_create: MicroGoalCreate,
    ) -> MicroGoal:
        """
        Create a new habit under a macro goal.

        Raises:
            GoalNotFoundError: If the macro goal doesn't exist
            GoalLimitError: If the macro goal already has the maximum of habits
        """
        await self._require_macro_goal(user_id, goal_create.macro_goal_id)

        existing_count = await self.micro_goals.count_documents({
            "user_id": user_id,
            "macro_goal_id": goal_create.macro_goal_id,
        })
        if existing_count >= settings.max_micro_goals_per_macro:
            raise GoalLimitError(
                f"You can only create up to {settings.max_micro_goals_per_macro} "
                "micro goals per macro goal"
            )

        now = datetime.utcnow()
        goal_doc = {
            "user_id": user_id,
            "macro_goal_id": goal_create.macro_goal_id,
            "title": goal_create.title,
            "xp_value": goal_create.xp_value or settings.default_xp_value,
            "frequency": goal_create.frequency.value,
            "custom_days": [day.value for day in goal_create.custom_days],
            "streak": 0,
            "last_completed": None,
            "completion_history": [],
            "completed": False,
            "is_archived": False,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.micro_goals.insert_one(goal_doc)
        goal_doc["_id"] = result.inserted_id

        goal = self._doc_to_goal(goal_doc)
        logger.info("Created micro goal %s under macro goal %s", goal.id, goal.macro_goal_id)
        await self._publish(GoalChangeKind.CREATED, user_id, goal.id, goal)
        return goal

    async def update_micro_goal(
        self,
        user_id: str,
        goal_id: str,
        goal_update: MicroGoalUpdate,
    ) -> MicroGoal:
        """
        Update a habit's settings. Completion fields are never touched here.

        Raises:
            GoalNotFoundError: If the habit (or a new macro goal) doesn't exist
            ValueError: If the result would be a custom rule with no days
        """
        existing = await self.fetch_goal(user_id, goal_id)

        update_doc = {"updated_at": datetime.utcnow()}

        if goal_update.title is not None:
            update_doc["title"] = goal_update.title
        if goal_update.xp_value is not None:
            update_doc["xp_value"] = goal_update.xp_value
        if goal_update.is_archived is not None:
            update_doc["is_archived"] = goal_update.is_archived
        if goal_update.macro_goal_id is not None:
            await self._require_macro_goal(user_id, goal_update.macro_goal_id)
            update_doc["macro_goal_id"] = goal_update.macro_goal_id

        if goal_update.frequency is not None or goal_update.custom_days is not None:
            frequency = (
                goal_update.frequency.value
                if goal_update.frequency is not None
                else existing.frequency
            )
            custom_days = (
                [day.value for day in goal_update.custom_days]
                if goal_update.custom_days is not None
                else existing.custom_days
            )
            if frequency != Frequency.CUSTOM.value:
                custom_days = []
            elif not custom_days:
                raise ValueError("Select at least one day for a custom schedule")
            update_doc["frequency"] = frequency
            update_doc["custom_days"] = custom_days

        updated_doc = await self.micro_goals.find_one_and_update(
            {"_id": parse_goal_id(goal_id), "user_id": user_id},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )

        if not updated_doc:
            raise GoalNotFoundError("Goal not found")

        goal = self._doc_to_goal(updated_doc)
        await self._publish(GoalChangeKind.UPDATED, user_id, goal.id, goal)
        return goal

    async def delete_micro_goal(self, user_id: str, goal_id: str) -> dict:
        """
        Delete a habit permanently.

        Raises:
            GoalNotFoundError: If goal not found
        """
        result = await self.micro_goals.delete_one({
            "_id": parse_goal_id(goal_id),
            "user_id": user_id,
        })

        if result.deleted_count == 0:
            raise GoalNotFoundError("Goal not found")

        logger.info("Deleted micro goal %s", goal_id)
        await self._publish(GoalChangeKind.DELETED, user_id, goal_id)
        return {"deleted_count": result.deleted_count}

    # Completion

    async def toggle_completion(
        self,
        user_id: str,
        goal_id: str,
        completed: bool,
        today: date,
    ) -> MicroGoal:
        """
        Mark today's occurrence of a habit done or undone.

        One read, one pure transition, one whole-record write. When today's
        ledger entry actually appears or disappears, the owning macro goal
        gains or loses the completion XP.

        Raises:
            GoalNotFoundError: If goal not found (nothing is written)
            PersistenceError: If the record vanished before the write
        """
        goal = await self.fetch_goal(user_id, goal_id)
        was_done = CompletionLedger(goal.completion_history).contains(today)

        updated = apply_completion(
            goal,
            completed,
            today,
            restore_last_completed=self.restore_last_completed,
        )
        saved = await self.save_goal(user_id, updated)

        # XP is a separate write; the habit record above stands even if it fails
        if saved.completed != was_done:
            streak = saved.streak if saved.completed else goal.streak
            amount = completion_xp(
                goal.xp_value,
                streak,
                multiplier=settings.streak_bonus_multiplier,
                max_bonus=settings.max_streak_bonus,
            )
            await MacroGoalService(self.db).add_xp(
                user_id,
                goal.macro_goal_id,
                amount if saved.completed else -amount,
            )

        logger.info(
            "Micro goal %s marked %s on %s (streak %d -> %d)",
            goal_id,
            "done" if completed else "undone",
            today.isoformat(),
            goal.streak,
            saved.streak,
        )
        await self._publish(GoalChangeKind.COMPLETED, user_id, saved.id, saved)
        return saved

    # Read-side views

    async def list_todays_goals(self, user_id: str, today: date) -> list[MicroGoal]:
        """Active habits due ``today``, with ``completed`` derived for today."""
        goals = await self.list_goals_for_user(user_id, include_archived=False)
        return todays_agenda(goals, today)

    async def build_timeline(self, user_id: str, goal_id: str, today: date) -> list[DayView]:
        """Seven-day timeline for one habit."""
        goal = await self.fetch_goal(user_id, goal_id)
        return build_window(goal, today)

    async def goal_stats(self, user_id: str, goal_id: str, today: date) -> MicroGoalStats:
        """Streak figures for one habit."""
        goal = await self.fetch_goal(user_id, goal_id)
        ledger = CompletionLedger(goal.completion_history)
        return MicroGoalStats(
            goal_id=goal.id,
            as_of=today,
            streak=goal.streak,
            current_streak=current_streak(goal, today),
            longest_streak=longest_streak(ledger),
            total_completions=len(ledger),
        )
