from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from habitflow.db.session import Database
from habitflow.schemas import (
    CompletionToggle,
    HabitCreate,
    HabitCreated,
    HabitsStatus,
    HabitStat,
    HabitsToday,
    ToggleResult,
)
from habitflow.services import habits as habit_service
from habitflow.services.completions import toggle_completion

from .dependencies import get_database, get_today

router = APIRouter(prefix="/api", tags=["habits"])


@router.get("/habits", response_model=HabitsToday)
async def list_habits(
    database: Database = Depends(get_database),
    today: date = Depends(get_today),
) -> HabitsToday:
    async with database.session_scope() as session:
        return await habit_service.get_habits_with_today_status(session, today)


@router.get("/habits/status", response_model=HabitsStatus)
async def habits_status(
    database: Database = Depends(get_database),
    today: date = Depends(get_today),
) -> HabitsStatus:
    """Per-habit view model with today's progress."""
    async with database.session_scope() as session:
        raw = await habit_service.get_habits_with_today_status(session, today)
    statuses = habit_service.habits_with_status(raw.habits, raw.completions)
    return HabitsStatus(date=today, progress=habit_service.today_progress(statuses), habits=statuses)


@router.post("/habits", response_model=HabitCreated)
async def create_habit(payload: HabitCreate, database: Database = Depends(get_database)) -> HabitCreated:
    async with database.session_scope() as session:
        habit = await habit_service.create_habit(session, payload.name, payload.emoji, payload.color)
        return HabitCreated(id=habit.id)


@router.delete("/habits/{habit_id}")
async def delete_habit(habit_id: int, database: Database = Depends(get_database)) -> dict:
    async with database.session_scope() as session:
        await habit_service.delete_habit(session, habit_id)
    return {"success": True}


@router.post("/complete", response_model=ToggleResult)
async def complete(payload: CompletionToggle, database: Database = Depends(get_database)) -> ToggleResult:
    async with database.session_scope() as session:
        status = await toggle_completion(session, payload.habit_id, payload.date, payload.proof_image_url)
    return ToggleResult(status=status)


@router.get("/stats", response_model=List[HabitStat])
async def stats(database: Database = Depends(get_database)) -> List[HabitStat]:
    async with database.session_scope() as session:
        return await habit_service.get_completion_stats(session)
