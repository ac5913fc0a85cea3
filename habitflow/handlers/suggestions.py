from __future__ import annotations

import logging
from typing import Optional

from aiogram import Router, types
from aiogram.filters import Command, CommandObject

from habitflow.db.session import Database
from habitflow.services import habits as habit_service
from habitflow.services.llm import GeminiClient

logger = logging.getLogger(__name__)

router = Router()


def icon_to_emoji(icon: str) -> Optional[str]:
    """Keep the model's icon only when it is an emoji, not an icon name."""
    icon = icon.strip()
    if not icon or len(icon) > 8 or any(ch.isalnum() for ch in icon):
        return None
    return icon


@router.message(Command("suggest"))
async def suggest(message: types.Message, command: CommandObject, database: Database, gemini: GeminiClient) -> None:
    goals = (command.args or "").strip()
    if not goals:
        await message.answer("Использование: /suggest ваши цели")
        return
    status_msg = await message.answer("⏳ Подбираю привычки...")
    try:
        suggestions = await gemini.suggest_habits(goals)
    except Exception:
        logger.exception("Habit suggestion failed")
        await status_msg.edit_text("Не удалось получить подсказки. Попробуйте позже.")
        return
    if not suggestions:
        await status_msg.edit_text("ИИ ничего не предложил. Попробуйте описать цели подробнее.")
        return

    async with database.session_scope() as session:
        for s in suggestions:
            await habit_service.create_habit(session, s.name, icon_to_emoji(s.icon), s.color)
    lines = [f"{icon_to_emoji(s.icon) or '•'} {s.name}" for s in suggestions]
    await status_msg.edit_text("Добавлены привычки ✅\n" + "\n".join(lines) + "\n\nСписок: /habits")
