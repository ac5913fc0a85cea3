from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher

from habitflow.config import settings
from habitflow.db.session import Database
from habitflow.handlers import setup_routers
from habitflow.logging_config import setup_logging
from habitflow.middlewares import InteractionLoggingMiddleware
from habitflow.services.llm import GeminiClient


async def main() -> None:
    logger = setup_logging()
    logger.info("Starting HabitFlow bot")
    if not settings.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is not set")

    database = Database(settings.DATABASE_URL)
    database.open()
    await database.create_all(reset=settings.RESET_DB_ON_START)
    gemini = GeminiClient.from_settings(settings)

    bot = Bot(token=settings.BOT_TOKEN)
    # database/gemini/settings попадают в хендлеры по имени аргумента
    dp = Dispatcher(database=database, gemini=gemini, settings=settings)
    dp.message.outer_middleware(InteractionLoggingMiddleware())
    dp.include_router(setup_routers())

    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        await gemini.aclose()
        await database.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Bot stopped")
