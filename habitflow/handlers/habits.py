from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from aiogram import F, Router, types
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.types import InlineKeyboardMarkup

from habitflow.config import Settings
from habitflow.db.session import Database
from habitflow.keyboards.common import (
    DELETE_PREFIX,
    REFRESH,
    TOGGLE_PREFIX,
    habits_keyboard,
    parse_habit_id,
)
from habitflow.schemas import ToggleStatus
from habitflow.services import habits as habit_service
from habitflow.services.completions import toggle_completion
from habitflow.services.llm import GeminiClient
from habitflow.utils.timezone_utils import format_day, local_today

logger = logging.getLogger(__name__)

router = Router()

_COLOR_RE = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


def parse_add_args(args: str) -> Tuple[str, Optional[str], Optional[str]]:
    """Split ``Название [эмодзи] [#цвет]`` into name, emoji and color.

    The color is the last token when it looks like a hex color, the emoji is
    the last remaining token when it has no letters or digits.
    """
    parts = args.split()
    color = None
    emoji = None
    if len(parts) > 1 and _COLOR_RE.match(parts[-1]):
        color = parts.pop()
    if len(parts) > 1 and not any(ch.isalnum() for ch in parts[-1]):
        emoji = parts.pop()
    return " ".join(parts), emoji, color


async def render_today(database: Database, settings: Settings) -> Tuple[str, InlineKeyboardMarkup]:
    today = local_today(settings.DEFAULT_TIMEZONE)
    async with database.session_scope() as session:
        raw = await habit_service.get_habits_with_today_status(session, today)
    statuses = habit_service.habits_with_status(raw.habits, raw.completions)
    if not statuses:
        text = f"📅 {format_day(today)}\nПривычек пока нет. Добавьте: /add Чтение 📖"
    else:
        text = (
            f"📅 {format_day(today)}\n"
            f"Прогресс за сегодня: {habit_service.today_progress(statuses)}%\n\n"
            "Нажмите на привычку, чтобы отметить выполнение."
        )
    return text, habits_keyboard(statuses)


async def update_list(cb: types.CallbackQuery, database: Database, settings: Settings) -> None:
    text, keyboard = await render_today(database, settings)
    try:
        await cb.message.edit_text(text, reply_markup=keyboard)
    except TelegramBadRequest as e:
        if "message is not modified" not in str(e):
            raise


@router.message(Command("habits"))
async def list_habits(message: types.Message, database: Database, settings: Settings) -> None:
    text, keyboard = await render_today(database, settings)
    await message.answer(text, reply_markup=keyboard)


@router.message(Command("add"))
async def add_habit(message: types.Message, command: CommandObject, database: Database) -> None:
    if not command.args:
        await message.answer("Использование: /add Название [эмодзи] [#цвет]")
        return
    name, emoji, color = parse_add_args(command.args)
    async with database.session_scope() as session:
        habit = await habit_service.create_habit(session, name, emoji, color)
    await message.answer(f"Привычка «{name}» создана ✅ (ID {habit.id})")


@router.message(Command("delete"))
async def delete_habit_cmd(message: types.Message, command: CommandObject, database: Database) -> None:
    try:
        habit_id = int((command.args or "").strip())
    except ValueError:
        await message.answer("Использование: /delete ID")
        return
    async with database.session_scope() as session:
        await habit_service.delete_habit(session, habit_id)
    await message.answer("Привычка удалена 🗑")


@router.message(Command("stats"))
async def stats(message: types.Message, database: Database) -> None:
    async with database.session_scope() as session:
        rows = await habit_service.get_completion_stats(session)
    if not rows:
        await message.answer("Статистики пока нет.")
        return
    lines = [f"• {row.name}: {row.completion_count}" for row in rows]
    await message.answer("📊 Выполнения по привычкам:\n" + "\n".join(lines))


@router.callback_query(F.data == REFRESH)
async def refresh(cb: types.CallbackQuery, database: Database, settings: Settings) -> None:
    await cb.answer()
    await update_list(cb, database, settings)


@router.callback_query(F.data.startswith(TOGGLE_PREFIX))
async def toggle(cb: types.CallbackQuery, database: Database, settings: Settings, gemini: GeminiClient) -> None:
    habit_id = parse_habit_id(cb.data or "", TOGGLE_PREFIX)
    if habit_id is None:
        await cb.answer()
        return
    today = local_today(settings.DEFAULT_TIMEZONE)
    async with database.session_scope() as session:
        habit = await habit_service.get_habit(session, habit_id)
        if habit is None:
            await cb.answer("Привычка не найдена", show_alert=True)
            return
        habit_name = habit.name
        status = await toggle_completion(session, habit_id, today)

    # callback отвечаем до редактирования списка
    completed = status is ToggleStatus.completed
    await cb.answer("Выполнено ✅" if completed else "Отметка снята")
    await update_list(cb, database, settings)
    if not completed:
        return
    try:
        quote = await gemini.get_motivation(habit_name)
    except Exception:
        logger.exception("Motivation request failed for habit %s", habit_id)
        return
    if quote:
        await cb.message.answer(f"💬 {quote}")


@router.callback_query(F.data.startswith(DELETE_PREFIX))
async def delete_habit_cb(cb: types.CallbackQuery, database: Database, settings: Settings) -> None:
    habit_id = parse_habit_id(cb.data or "", DELETE_PREFIX)
    if habit_id is None:
        await cb.answer()
        return
    async with database.session_scope() as session:
        await habit_service.delete_habit(session, habit_id)
    await cb.answer("Привычка удалена 🗑")
    await update_list(cb, database, settings)
