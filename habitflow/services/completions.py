from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from habitflow.db.models import Completion
from habitflow.schemas import ToggleStatus
from habitflow.services.errors import ToggleConflictError

logger = logging.getLogger(__name__)


def is_duplicate_completion(exc: IntegrityError) -> bool:
    """True when ``exc`` is the (habit, day) unique violation, not e.g. a foreign key error."""
    # PostgreSQL names the constraint, SQLite lists the columns
    text = str(exc.orig)
    return "uq_completion_habit_day" in text or "UNIQUE constraint failed: completion." in text


async def get_completion(session: AsyncSession, habit_id: int, day: date) -> Optional[Completion]:
    return (
        await session.execute(
            select(Completion).where(Completion.habit_id == habit_id, Completion.completed_at == day)
        )
    ).scalar_one_or_none()


async def _apply_to_existing(
    session: AsyncSession, existing: Completion, proof_image_url: Optional[str]
) -> ToggleStatus:
    if proof_image_url:
        existing.proof_image_url = proof_image_url
        await session.flush()
        return ToggleStatus.updated
    await session.delete(existing)
    await session.flush()
    return ToggleStatus.uncompleted


async def toggle_completion(
    session: AsyncSession,
    habit_id: int,
    day: date,
    proof_image_url: Optional[str] = None,
) -> ToggleStatus:
    """Flip completion state of ``habit_id`` on ``day``.

    - no row: insert one (with the proof, if any) -> ``completed``
    - row and a proof: replace the proof -> ``updated``
    - row and no proof: delete it -> ``uncompleted``

    The habit id is not checked. The insert runs in a savepoint: if a
    concurrent request inserts the same (habit, day) first, the unique
    constraint rejects it, only the savepoint is rolled back and the call
    continues as if it ran after the other one. Other integrity errors
    propagate.
    """
    proof_image_url = proof_image_url or None
    existing = await get_completion(session, habit_id, day)
    if existing is not None:
        status = await _apply_to_existing(session, existing, proof_image_url)
    else:
        try:
            async with session.begin_nested():
                session.add(Completion(habit_id=habit_id, completed_at=day, proof_image_url=proof_image_url))
                await session.flush()
            status = ToggleStatus.completed
        except IntegrityError as exc:
            if not is_duplicate_completion(exc):
                raise
            logger.warning("Completion for habit %s on %s inserted concurrently, re-reading", habit_id, day)
            existing = await get_completion(session, habit_id, day)
            if existing is None:
                raise ToggleConflictError(habit_id, day) from exc
            status = await _apply_to_existing(session, existing, proof_image_url)

    logger.info("Habit %s on %s: %s", habit_id, day, status.value)
    return status
