#!/usr/bin/env python3
"""
Tests for the completion toggle: completed / updated / uncompleted.
"""

import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from habitflow.db.models import Completion
from habitflow.schemas import ToggleStatus
from habitflow.services import completions
from habitflow.services.completions import get_completion, is_duplicate_completion, toggle_completion
from habitflow.services.errors import ToggleConflictError
from habitflow.services.habits import create_habit, list_habits

DAY = date(2024, 1, 1)
PROOF = "data:image/png;base64,AAAA"


async def _run(database, scenario):
    database.open()
    try:
        await database.create_all()
        return await scenario(database)
    finally:
        await database.close()


async def _count(database, habit_id):
    async with database.session_scope() as session:
        return (
            await session.execute(select(func.count(Completion.id)).where(Completion.habit_id == habit_id))
        ).scalar_one()


async def _new_habit(database, name="Read"):
    async with database.session_scope() as session:
        return (await create_habit(session, name, "📖")).id


async def _toggle(database, habit_id, day=DAY, proof=None):
    async with database.session_scope() as session:
        return await toggle_completion(session, habit_id, day, proof)


def test_toggle_twice_without_proof_removes_row(database):
    async def scenario(db):
        habit_id = await _new_habit(db)
        first = await _toggle(db, habit_id)
        second = await _toggle(db, habit_id)
        return first, second, await _count(db, habit_id)

    first, second, count = asyncio.run(_run(database, scenario))
    assert first is ToggleStatus.completed
    assert second is ToggleStatus.uncompleted
    assert count == 0


def test_proof_on_existing_completion_updates_in_place(database):
    async def scenario(db):
        habit_id = await _new_habit(db)
        first = await _toggle(db, habit_id)
        second = await _toggle(db, habit_id, proof=PROOF)
        async with db.session_scope() as session:
            row = await get_completion(session, habit_id, DAY)
            proof = row.proof_image_url
        return first, second, await _count(db, habit_id), proof

    first, second, count, proof = asyncio.run(_run(database, scenario))
    assert (first, second) == (ToggleStatus.completed, ToggleStatus.updated)
    assert count == 1
    assert proof == PROOF


def test_example_scenario(database):
    async def scenario(db):
        habit_id = await _new_habit(db)
        statuses = [
            await _toggle(db, habit_id),
            await _toggle(db, habit_id),
            await _toggle(db, habit_id, proof=PROOF),
        ]
        async with db.session_scope() as session:
            stored = (await get_completion(session, habit_id, DAY)).proof_image_url
        statuses.append(await _toggle(db, habit_id, proof=PROOF))
        return habit_id, statuses, stored

    habit_id, statuses, stored = asyncio.run(_run(database, scenario))
    assert habit_id == 1
    assert statuses == [
        ToggleStatus.completed,
        ToggleStatus.uncompleted,
        ToggleStatus.completed,
        ToggleStatus.updated,
    ]
    assert stored == PROOF


def test_empty_proof_counts_as_no_proof(database):
    async def scenario(db):
        habit_id = await _new_habit(db)
        await _toggle(db, habit_id, proof=PROOF)
        return await _toggle(db, habit_id, proof="")

    assert asyncio.run(_run(database, scenario)) is ToggleStatus.uncompleted


def test_dates_are_independent(database):
    async def scenario(db):
        habit_id = await _new_habit(db)
        await _toggle(db, habit_id, day=date(2024, 1, 1))
        second_day = await _toggle(db, habit_id, day=date(2024, 1, 2))
        return second_day, await _count(db, habit_id)

    status, count = asyncio.run(_run(database, scenario))
    assert status is ToggleStatus.completed
    assert count == 2


def test_unknown_habit_creates_orphan_row(database):
    async def scenario(db):
        status = await _toggle(db, 999)
        return status, await _count(db, 999)

    status, count = asyncio.run(_run(database, scenario))
    assert status is ToggleStatus.completed
    assert count == 1


def _lose_first_read(monkeypatch, always=False):
    """Make the toggle miss a row another request has just inserted."""
    real = completions.get_completion
    calls = {"n": 0}

    async def stale_read(session, habit_id, day):
        calls["n"] += 1
        if always or calls["n"] == 1:
            return None
        return await real(session, habit_id, day)

    monkeypatch.setattr(completions, "get_completion", stale_read)


def test_racing_insert_resolves_as_sequential_toggle(database, monkeypatch):
    async def scenario(db):
        habit_id = await _new_habit(db)
        await _toggle(db, habit_id)
        _lose_first_read(monkeypatch)
        status = await _toggle(db, habit_id)
        return status, await _count(db, habit_id)

    status, count = asyncio.run(_run(database, scenario))
    assert status is ToggleStatus.uncompleted
    assert count == 0


def test_racing_insert_with_proof_updates(database, monkeypatch):
    async def scenario(db):
        habit_id = await _new_habit(db)
        await _toggle(db, habit_id)
        _lose_first_read(monkeypatch)
        status = await _toggle(db, habit_id, proof=PROOF)
        return status, await _count(db, habit_id)

    status, count = asyncio.run(_run(database, scenario))
    assert status is ToggleStatus.updated
    assert count == 1


def test_unresolvable_conflict_raises(database, monkeypatch):
    async def scenario(db):
        habit_id = await _new_habit(db)
        await _toggle(db, habit_id)
        _lose_first_read(monkeypatch, always=True)
        await _toggle(db, habit_id)

    with pytest.raises(ToggleConflictError):
        asyncio.run(_run(database, scenario))


def test_racing_insert_keeps_earlier_writes_of_the_session(database, monkeypatch):
    async def scenario(db):
        old_id = await _new_habit(db, "Old")
        await _toggle(db, old_id)
        _lose_first_read(monkeypatch)
        async with db.session_scope() as session:
            new_habit = await create_habit(session, "New")
            status = await toggle_completion(session, old_id, DAY)
            new_id = new_habit.id
        async with db.session_scope() as session:
            names = [h.name for h in await list_habits(session)]
        return status, new_id, names, await _count(db, old_id)

    status, new_id, names, count = asyncio.run(_run(database, scenario))
    assert status is ToggleStatus.uncompleted
    assert new_id == 2
    assert names == ["Old", "New"]
    assert count == 0


class _DriverError(Exception):
    pass


def _integrity_error(message):
    return IntegrityError("INSERT INTO completion ...", {}, _DriverError(message))


def test_duplicate_detection_only_matches_the_day_constraint():
    assert is_duplicate_completion(
        _integrity_error("UNIQUE constraint failed: completion.habit_id, completion.completed_at")
    )
    assert is_duplicate_completion(
        _integrity_error('duplicate key value violates unique constraint "uq_completion_habit_day"')
    )
    assert not is_duplicate_completion(_integrity_error("FOREIGN KEY constraint failed"))
    assert not is_duplicate_completion(
        _integrity_error('insert or update on table "completion" violates foreign key constraint "completion_habit_id_fkey"')
    )


def test_foreign_key_violation_is_not_treated_as_race(database, monkeypatch):
    async def failing_flush(self, objects=None):
        raise _integrity_error("FOREIGN KEY constraint failed")

    async def scenario(db):
        monkeypatch.setattr(AsyncSession, "flush", failing_flush)
        await _toggle(db, 999)

    with pytest.raises(IntegrityError):
        asyncio.run(_run(database, scenario))
