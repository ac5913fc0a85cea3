#!/usr/bin/env python3
"""
Tests for habit CRUD, today's aggregation and completion stats.
"""

import asyncio
from datetime import date, datetime

from habitflow.schemas import CompletionRead, HabitRead
from habitflow.services import habits as habit_service
from habitflow.services.completions import toggle_completion

TODAY = date(2024, 3, 10)
YESTERDAY = date(2024, 3, 9)


async def _run(database, scenario):
    database.open()
    try:
        await database.create_all()
        async with database.session_scope() as session:
            return await scenario(session)
    finally:
        await database.close()


def test_identical_habits_get_distinct_ids(database):
    async def scenario(session):
        a = await habit_service.create_habit(session, "Read", "📖", "#007AFF")
        b = await habit_service.create_habit(session, "Read", "📖", "#007AFF")
        await habit_service.delete_habit(session, a.id)
        remaining = await habit_service.list_habits(session)
        return a.id, b.id, [h.id for h in remaining]

    a_id, b_id, remaining = asyncio.run(_run(database, scenario))
    assert a_id != b_id
    assert remaining == [b_id]


def test_new_habit_defaults(database):
    async def scenario(session):
        habit = await habit_service.create_habit(session, "Walk")
        return habit.frequency, habit.emoji, habit.color, habit.created_at

    frequency, emoji, color, created_at = asyncio.run(_run(database, scenario))
    assert frequency == "daily"
    assert emoji is None and color is None
    assert isinstance(created_at, datetime)


def test_delete_cascades_to_completions(database):
    async def scenario(session):
        keep = await habit_service.create_habit(session, "Keep")
        drop = await habit_service.create_habit(session, "Drop")
        for day in (YESTERDAY, TODAY):
            await toggle_completion(session, drop.id, day)
        await toggle_completion(session, keep.id, TODAY)
        await habit_service.delete_habit(session, drop.id)
        return drop.id, keep.id, await habit_service.get_habits_with_today_status(session, TODAY)

    drop_id, keep_id, view = asyncio.run(_run(database, scenario))
    assert [h.id for h in view.habits] == [keep_id]
    assert all(c.habit_id != drop_id for c in view.completions)
    assert [c.habit_id for c in view.completions] == [keep_id]


def test_delete_missing_habit_is_silent(database):
    async def scenario(session):
        await habit_service.delete_habit(session, 42)
        return await habit_service.list_habits(session)

    assert asyncio.run(_run(database, scenario)) == []


def test_today_view_only_contains_today(database):
    async def scenario(session):
        habit = await habit_service.create_habit(session, "Run", "🏃")
        await toggle_completion(session, habit.id, YESTERDAY)
        return await habit_service.get_habits_with_today_status(session, TODAY)

    view = asyncio.run(_run(database, scenario))
    assert len(view.habits) == 1
    assert view.completions == []

    statuses = habit_service.habits_with_status(view.habits, view.completions)
    assert statuses[0].completed_today is False
    assert statuses[0].proof_image_url is None


def test_stats_count_all_days_and_zero(database):
    async def scenario(session):
        busy = await habit_service.create_habit(session, "Busy")
        await habit_service.create_habit(session, "Idle")
        for day in (YESTERDAY, TODAY):
            await toggle_completion(session, busy.id, day)
        return await habit_service.get_completion_stats(session)

    stats = asyncio.run(_run(database, scenario))
    assert [(s.name, s.completion_count) for s in stats] == [("Busy", 2), ("Idle", 0)]


def _habit(habit_id, name="H"):
    return HabitRead(id=habit_id, name=name, created_at=datetime(2024, 1, 1))


def _completion(completion_id, habit_id, proof=None):
    return CompletionRead(id=completion_id, habit_id=habit_id, completed_at=TODAY, proof_image_url=proof)


def test_habits_with_status_takes_first_match():
    habits = [_habit(1), _habit(2)]
    completions = [_completion(10, 1, "data:first"), _completion(11, 1, "data:second")]

    statuses = habit_service.habits_with_status(habits, completions)

    assert statuses[0].completed_today is True
    assert statuses[0].proof_image_url == "data:first"
    assert statuses[1].completed_today is False


def test_today_progress():
    assert habit_service.today_progress([]) == 0
    statuses = habit_service.habits_with_status(
        [_habit(1), _habit(2), _habit(3)],
        [_completion(10, 1), _completion(11, 3)],
    )
    assert habit_service.today_progress(statuses) == 67
