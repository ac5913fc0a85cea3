from __future__ import annotations

import base64
import logging

from aiogram import Bot, F, Router, types
from aiogram.filters import Command, CommandObject
from aiogram.types import BufferedInputFile

from habitflow.config import Settings
from habitflow.db.session import Database
from habitflow.services import habits as habit_service
from habitflow.services.completions import get_completion, toggle_completion
from habitflow.services.llm import GeminiClient, split_data_uri
from habitflow.utils.timezone_utils import local_today

logger = logging.getLogger(__name__)

router = Router()

STATUS_TEXT = {
    "completed": "Выполнено ✅ Доказательство сохранено 📷",
    "updated": "Доказательство обновлено 📷",
    "uncompleted": "Отметка снята",
}


@router.message(F.photo)
async def photo_proof(message: types.Message, bot: Bot, database: Database, settings: Settings) -> None:
    """Photo with caption ``<habit_id>`` marks the habit done with proof."""
    caption = (message.caption or "").strip()
    if not caption.isdigit():
        await message.answer("Добавьте к фото подпись с ID привычки (см. /habits).")
        return
    habit_id = int(caption)

    async with database.session_scope() as session:
        if await habit_service.get_habit(session, habit_id) is None:
            await message.answer("Привычка не найдена.")
            return

    buffer = await bot.download(message.photo[-1])
    encoded = base64.b64encode(buffer.read()).decode("ascii")
    # Telegram пересжимает фото в JPEG
    proof = f"data:image/jpeg;base64,{encoded}"

    today = local_today(settings.DEFAULT_TIMEZONE)
    async with database.session_scope() as session:
        status = await toggle_completion(session, habit_id, today, proof)
    await message.answer(STATUS_TEXT[status.value])


@router.message(Command("edit_proof"))
async def edit_proof(
    message: types.Message,
    command: CommandObject,
    database: Database,
    settings: Settings,
    gemini: GeminiClient,
) -> None:
    """/edit_proof ID инструкция: edit today's proof image with the model."""
    habit_id_str, _, prompt = (command.args or "").strip().partition(" ")
    if not habit_id_str.isdigit() or not prompt.strip():
        await message.answer("Использование: /edit_proof ID инструкция")
        return
    habit_id = int(habit_id_str)
    today = local_today(settings.DEFAULT_TIMEZONE)

    async with database.session_scope() as session:
        completion = await get_completion(session, habit_id, today)
        proof = completion.proof_image_url if completion else None
    if not proof:
        await message.answer("Сегодня для этой привычки нет фото-доказательства.")
        return
    if not proof.startswith("data:"):
        await message.answer("Редактировать можно только загруженные фото.")
        return

    status_msg = await message.answer("⏳ Редактирую фото...")
    try:
        edited = await gemini.edit_proof_image(proof, prompt.strip())
    except Exception:
        logger.exception("Proof image edit failed for habit %s", habit_id)
        await status_msg.edit_text("Не удалось отредактировать фото.")
        return
    if not edited:
        await status_msg.edit_text("ИИ не вернул изображение.")
        return

    async with database.session_scope() as session:
        await toggle_completion(session, habit_id, today, edited)
    mime_type, payload = split_data_uri(edited)
    extension = mime_type.split("/")[-1] or "png"
    await message.answer_photo(
        BufferedInputFile(base64.b64decode(payload), filename=f"proof_{habit_id}.{extension}"),
        caption="Доказательство обновлено 📷",
    )
    await status_msg.delete()
