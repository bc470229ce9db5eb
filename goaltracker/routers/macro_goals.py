"""Macro goal router - API endpoints for outcome-level goals and anti-goals."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from goaltracker.database import get_database
from goaltracker.errors import GoalLimitError, GoalNotFoundError
from goaltracker.models.macro_goal import MacroGoal, MacroGoalCreate, MacroGoalUpdate
from goaltracker.models.micro_goal import MicroGoal
from goaltracker.routers.auth import get_current_user_id
from goaltracker.services.macro_goal_service import MacroGoalService
from goaltracker.services.micro_goal_service import MicroGoalService
from goaltracker.services.notifier import notifier


router = APIRouter(prefix="/macro-goals", tags=["macro-goals"])


@router.post("", response_model=MacroGoal, status_code=status.HTTP_201_CREATED)
async def create_macro_goal(
    goal: MacroGoalCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new macro goal or anti-goal.

    - Regular goals and anti-goals are limited separately (400 when full)
    """
    service = MacroGoalService(db, notifier)
    try:
        return await service.create_macro_goal(user_id=user_id, goal_create=goal)
    except GoalLimitError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[MacroGoal])
async def list_macro_goals(
    is_anti_goal: Optional[bool] = Query(None, description="Only anti-goals (true) or only regular goals (false)"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List the user's macro goals, newest first."""
    service = MacroGoalService(db)
    return await service.list_macro_goals(user_id=user_id, is_anti_goal=is_anti_goal)


@router.get("/{goal_id}", response_model=MacroGoal)
async def get_macro_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get a single macro goal (404 if missing)."""
    service = MacroGoalService(db)
    try:
        return await service.get_macro_goal(user_id=user_id, goal_id=goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{goal_id}/micro-goals", response_model=list[MicroGoal])
async def list_macro_goal_habits(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List the habits that belong to a macro goal."""
    try:
        await MacroGoalService(db).get_macro_goal(user_id=user_id, goal_id=goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    service = MicroGoalService(db)
    return await service.list_goals_for_user(user_id=user_id, macro_goal_id=goal_id)


@router.patch("/{goal_id}", response_model=MacroGoal)
async def update_macro_goal(
    goal_id: str,
    goal_update: MacroGoalUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Update a macro goal (404 if missing)."""
    service = MacroGoalService(db, notifier)
    try:
        return await service.update_macro_goal(
            user_id=user_id,
            goal_id=goal_id,
            goal_update=goal_update,
        )
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{goal_id}")
async def delete_macro_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a macro goal.

    - Also deletes every micro goal under it
    - Returns 404 if goal not found
    """
    service = MacroGoalService(db, notifier)
    try:
        return await service.delete_macro_goal(user_id=user_id, goal_id=goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
