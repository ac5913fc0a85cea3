from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from habitflow.db.models import Completion, Habit
from habitflow.schemas import (
    CompletionRead,
    HabitRead,
    HabitsToday,
    HabitStat,
    HabitWithStatus,
)

logger = logging.getLogger(__name__)


async def create_habit(
    session: AsyncSession,
    name: str,
    emoji: Optional[str] = None,
    color: Optional[str] = None,
) -> Habit:
    habit = Habit(name=name, emoji=emoji, color=color)
    session.add(habit)
    await session.flush()
    logger.info("Habit %s created: %s", habit.id, name)
    return habit


async def get_habit(session: AsyncSession, habit_id: int) -> Optional[Habit]:
    return await session.get(Habit, habit_id)


async def list_habits(session: AsyncSession) -> List[Habit]:
    result = await session.execute(select(Habit).order_by(Habit.id))
    return list(result.scalars().all())


async def delete_habit(session: AsyncSession, habit_id: int) -> None:
    """Delete a habit together with all of its completions.

    Missing ids are ignored. The cascade lives here, the schema has no
    ON DELETE action.
    """
    await session.execute(delete(Completion).where(Completion.habit_id == habit_id))
    result = await session.execute(delete(Habit).where(Habit.id == habit_id))
    if result.rowcount:
        logger.info("Habit %s deleted", habit_id)
    else:
        logger.debug("Habit %s not found, nothing to delete", habit_id)


async def get_habits_with_today_status(session: AsyncSession, today: date) -> HabitsToday:
    """Every habit plus the completions dated ``today``."""
    habits = await list_habits(session)
    completions = (
        await session.execute(
            select(Completion).where(Completion.completed_at == today).order_by(Completion.id)
        )
    ).scalars().all()
    return HabitsToday(
        habits=[HabitRead.model_validate(h) for h in habits],
        completions=[CompletionRead.model_validate(c) for c in completions],
    )


def habits_with_status(
    habits: Sequence[HabitRead],
    completions: Sequence[CompletionRead],
) -> List[HabitWithStatus]:
    """Join habits with today's completions; first matching completion wins."""
    statuses = []
    for habit in habits:
        match = next((c for c in completions if c.habit_id == habit.id), None)
        statuses.append(
            HabitWithStatus(
                **habit.model_dump(),
                completed_today=match is not None,
                proof_image_url=match.proof_image_url if match else None,
            )
        )
    return statuses


def today_progress(statuses: Sequence[HabitWithStatus]) -> int:
    """Share of habits completed today, in percent."""
    if not statuses:
        return 0
    done = sum(1 for s in statuses if s.completed_today)
    return round(done * 100 / len(statuses))


async def get_completion_stats(session: AsyncSession) -> List[HabitStat]:
    rows = await session.execute(
        select(Habit.name, func.count(Completion.id).label("completion_count"))
        .select_from(Habit)
        .outerjoin(Completion, Habit.id == Completion.habit_id)
        .group_by(Habit.id, Habit.name)
        .order_by(Habit.id)
    )
    return [HabitStat(name=name, completion_count=count) for name, count in rows.all()]
