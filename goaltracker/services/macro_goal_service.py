"""Macro goal service - outcome-level goals, anti-goals and their XP."""
import logging
from datetime import datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from goaltracker.config import settings
from goaltracker.errors import GoalLimitError, GoalNotFoundError
from goaltracker.models.macro_goal import MacroGoal, MacroGoalCreate, MacroGoalUpdate
from goaltracker.services.notifier import GoalChangeEvent, GoalChangeKind, GoalChangeNotifier

logger = logging.getLogger(__name__)


def parse_goal_id(goal_id: str, label: str = "Goal") -> ObjectId:
    """Turn a path id into an ObjectId; a malformed id is simply not found."""
    try:
        return ObjectId(goal_id)
    except (InvalidId, TypeError):
        raise GoalNotFoundError(f"{label} not found")


class MacroGoalService:
    """Service for handling macro goal operations."""

    def __init__(self, db, notifier: Optional[GoalChangeNotifier] = None):
        """Initialize service with database connection."""
        self.db = db
        self.macro_goals = db["macro_goals"]
        self.micro_goals = db["micro_goals"]
        self.notifier = notifier

    def _doc_to_goal(self, doc: dict) -> MacroGoal:
        return MacroGoal(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            title=doc["title"],
            description=doc.get("description", ""),
            color=doc.get("color", "#f4511e"),
            is_anti_goal=doc.get("is_anti_goal", False),
            total_xp=doc.get("total_xp", 0),
            target_xp=doc.get("target_xp", settings.default_target_xp),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _publish(self, kind: GoalChangeKind, user_id: str, goal_id: str, goal=None):
        if self.notifier is not None:
            await self.notifier.publish(GoalChangeEvent(kind, user_id, goal_id, goal))

    async def create_macro_goal(
        self,
        user_id: str,
        goal_create: MacroGoalCreate,
    ) -> MacroGoal:
        """
        Create a new macro goal or anti-goal.

        Regular goals and anti-goals have separate limits.

        Raises:
            GoalLimitError: If the user already has the maximum of that kind
        """
        limit = (
            settings.max_macro_anti_goals
            if goal_create.is_anti_goal
            else settings.max_macro_goals
        )
        existing_count = await self.macro_goals.count_documents({
            "user_id": user_id,
            "is_anti_goal": goal_create.is_anti_goal,
        })
        if existing_count >= limit:
            kind = "anti-goals" if goal_create.is_anti_goal else "goals"
            raise GoalLimitError(f"You can only create up to {limit} {kind}")

        now = datetime.utcnow()
        goal_doc = {
            "user_id": user_id,
            "title": goal_create.title,
            "description": goal_create.description,
            "color": goal_create.color,
            "is_anti_goal": goal_create.is_anti_goal,
            "total_xp": 0,
            "target_xp": (
                goal_create.target_xp
                if goal_create.target_xp is not None
                else settings.default_target_xp
            ),
            "created_at": now,
            "updated_at": now,
        }

        result = await self.macro_goals.insert_one(goal_doc)
        goal_doc["_id"] = result.inserted_id

        goal = self._doc_to_goal(goal_doc)
        logger.info("Created macro goal %s for user %s", goal.id, user_id)
        await self._publish(GoalChangeKind.CREATED, user_id, goal.id, goal)
        return goal

    async def list_macro_goals(
        self,
        user_id: str,
        is_anti_goal: Optional[bool] = None,
    ) -> list[MacroGoal]:
        """
        List a user's macro goals, newest first.

        Args:
            user_id: User ID
            is_anti_goal: Only anti-goals (True), only regular goals (False),
                or both (None)
        """
        query = {"user_id": user_id}
        if is_anti_goal is not None:
            query["is_anti_goal"] = is_anti_goal

        cursor = self.macro_goals.find(query)
        goal_docs = await cursor.to_list(length=None)

        goals = [self._doc_to_goal(doc) for doc in goal_docs]
        goals.sort(key=lambda goal: goal.created_at, reverse=True)
        return goals

    async def get_macro_goal(self, user_id: str, goal_id: str) -> MacroGoal:
        """
        Get a single macro goal.

        Raises:
            GoalNotFoundError: If goal not found
        """
        goal_doc = await self.macro_goals.find_one({
            "_id": parse_goal_id(goal_id, "Macro goal"),
            "user_id": user_id,
        })

        if not goal_doc:
            raise GoalNotFoundError("Macro goal not found")

        return self._doc_to_goal(goal_doc)

    async def update_macro_goal(
        self,
        user_id: str,
        goal_id: str,
        goal_update: MacroGoalUpdate,
    ) -> MacroGoal:
        """
        Update a macro goal. ``total_xp`` and ``is_anti_goal`` are not editable.

        Raises:
            GoalNotFoundError: If goal not found
        """
        object_id = parse_goal_id(goal_id, "Macro goal")

        update_doc = goal_update.model_dump(exclude_none=True)
        update_doc["updated_at"] = datetime.utcnow()

        updated_doc = await self.macro_goals.find_one_and_update(
            {"_id": object_id, "user_id": user_id},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )

        if not updated_doc:
            raise GoalNotFoundError("Macro goal not found")

        goal = self._doc_to_goal(updated_doc)
        await self._publish(GoalChangeKind.UPDATED, user_id, goal.id, goal)
        return goal

    async def delete_macro_goal(self, user_id: str, goal_id: str) -> dict:
        """
        Delete a macro goal and every micro goal under it.

        Returns:
            Dictionary with deleted_count and micro_goals_deleted

        Raises:
            GoalNotFoundError: If goal not found
        """
        object_id = parse_goal_id(goal_id, "Macro goal")

        existing = await self.macro_goals.find_one({"_id": object_id, "user_id": user_id})
        if not existing:
            raise GoalNotFoundError("Macro goal not found")

        micro_result = await self.micro_goals.delete_many({
            "user_id": user_id,
            "macro_goal_id": goal_id,
        })
        result = await self.macro_goals.delete_one({"_id": object_id, "user_id": user_id})

        logger.info(
            "Deleted macro goal %s and %d micro goals",
            goal_id,
            micro_result.deleted_count,
        )
        await self._publish(GoalChangeKind.DELETED, user_id, goal_id)
        return {
            "deleted_count": result.deleted_count,
            "micro_goals_deleted": micro_result.deleted_count,
        }

    async def add_xp(self, user_id: str, goal_id: str, amount: int) -> bool:
        """
        Add (or with a negative amount, remove) XP; the total never drops below 0.

        Returns:
            False if the macro goal no longer exists
        """
        if not ObjectId.is_valid(goal_id):
            logger.warning("XP not credited: bad macro goal id %r", goal_id)
            return False
        query = {"_id": ObjectId(goal_id), "user_id": user_id}

        result = await self.macro_goals.update_one(
            query,
            {"$inc": {"total_xp": amount}, "$set": {"updated_at": datetime.utcnow()}},
        )
        if result.matched_count == 0:
            logger.warning("XP not credited: macro goal %s not found", goal_id)
            return False

        if amount < 0:
            await self.macro_goals.update_one(
                {**query, "total_xp": {"$lt": 0}},
                {"$set": {"total_xp": 0}},
            )
        return True
