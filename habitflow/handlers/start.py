from __future__ import annotations

from aiogram import Router, types
from aiogram.filters import Command, CommandStart

router = Router()


HELP_TEXT = (
    "HabitFlow: ежедневные привычки с фото-доказательствами.\n\n"
    "/habits — привычки на сегодня\n"
    "/add Название [эмодзи] [#цвет] — новая привычка\n"
    "/delete ID — удалить привычку\n"
    "/stats — сколько раз выполнена каждая привычка\n"
    "/suggest цели — ИИ предложит привычки\n"
    "/edit_proof ID инструкция — ИИ отредактирует фото-доказательство\n\n"
    "Фото с подписью ID привычки — отметить выполнение с доказательством."
)


@router.message(CommandStart())
async def start_handler(message: types.Message) -> None:
    await message.answer("Добро пожаловать в HabitFlow! 👋\n\n" + HELP_TEXT)


@router.message(Command("help"))
async def help_handler(message: types.Message) -> None:
    await message.answer(HELP_TEXT)
