"""Micro goal router - habits, today's agenda, completion and timeline."""
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, status

from goaltracker.config import settings
from goaltracker.core.clock import Clock
from goaltracker.database import get_database
from goaltracker.errors import GoalLimitError, GoalNotFoundError, PersistenceError
from goaltracker.models.micro_goal import (
    CompletionToggle,
    MicroGoal,
    MicroGoalCreate,
    MicroGoalStats,
    MicroGoalUpdate,
)
from goaltracker.models.timeline import DayView
from goaltracker.routers.auth import get_current_user_id
from goaltracker.services.micro_goal_service import MicroGoalService
from goaltracker.services.notifier import notifier


router = APIRouter(prefix="/micro-goals", tags=["micro-goals"])


def get_clock() -> Clock:
    """Dependency supplying "today" in the configured timezone."""
    return Clock(ZoneInfo(settings.timezone))


@router.post("", response_model=MicroGoal, status_code=status.HTTP_201_CREATED)
async def create_micro_goal(
    goal: MicroGoalCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new habit.

    - Macro goal must exist (404)
    - At most the configured number of habits per macro goal (400)
    - Custom frequency needs at least one day (422)
    """
    service = MicroGoalService(db, notifier)
    try:
        return await service.create_micro_goal(user_id=user_id, goal_create=goal)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except GoalLimitError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[MicroGoal])
async def list_micro_goals(
    macro_goal_id: Optional[str] = Query(None, description="Filter by macro goal"),
    include_archived: bool = Query(True, description="Include archived habits"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List the user's habits."""
    service = MicroGoalService(db)
    return await service.list_goals_for_user(
        user_id=user_id,
        macro_goal_id=macro_goal_id,
        include_archived=include_archived,
    )


@router.get("/today", response_model=list[MicroGoal])
async def list_todays_micro_goals(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock: Clock = Depends(get_clock),
):
    """
    Today's agenda.

    - Non-archived habits whose recurrence rule is due today
    - ``completed`` reflects today's ledger entry
    """
    service = MicroGoalService(db)
    return await service.list_todays_goals(user_id=user_id, today=clock.today())


@router.get("/{goal_id}", response_model=MicroGoal)
async def get_micro_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get a single habit (404 if missing)."""
    service = MicroGoalService(db)
    try:
        return await service.fetch_goal(user_id=user_id, goal_id=goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{goal_id}", response_model=MicroGoal)
async def update_micro_goal(
    goal_id: str,
    goal_update: MicroGoalUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a habit's settings.

    - Returns 404 if the habit (or new macro goal) is missing
    - Returns 400 if the result would be a custom rule with no days
    """
    service = MicroGoalService(db, notifier)
    try:
        return await service.update_micro_goal(
            user_id=user_id,
            goal_id=goal_id,
            goal_update=goal_update,
        )
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{goal_id}")
async def delete_micro_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Delete a habit permanently (404 if missing)."""
    service = MicroGoalService(db, notifier)
    try:
        return await service.delete_micro_goal(user_id=user_id, goal_id=goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{goal_id}/completion", response_model=MicroGoal)
async def toggle_micro_goal_completion(
    goal_id: str,
    toggle: CompletionToggle,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock: Clock = Depends(get_clock),
):
    """
    Mark today's occurrence done or undone.

    - Updates streak, last completion, history and flag in one write
    - Returns 404 if the habit is missing, 409 if it vanished mid-update
    """
    service = MicroGoalService(db, notifier)
    try:
        return await service.toggle_completion(
            user_id=user_id,
            goal_id=goal_id,
            completed=toggle.completed,
            today=clock.today(),
        )
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{goal_id}/timeline", response_model=list[DayView])
async def get_micro_goal_timeline(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock: Clock = Depends(get_clock),
):
    """Two days back, today and four days ahead."""
    service = MicroGoalService(db)
    try:
        return await service.build_timeline(user_id=user_id, goal_id=goal_id, today=clock.today())
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{goal_id}/stats", response_model=MicroGoalStats)
async def get_micro_goal_stats(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock: Clock = Depends(get_clock),
):
    """Current, stored and longest streak plus total completions."""
    service = MicroGoalService(db)
    try:
        return await service.goal_stats(user_id=user_id, goal_id=goal_id, today=clock.today())
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
