from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import Message

logger = logging.getLogger("habitflow.interactions")


class InteractionLoggingMiddleware(BaseMiddleware):
    """Middleware to log all incoming messages."""

    async def __call__(
        self,
        handler: Callable[[Message, Dict[str, Any]], Awaitable[Any]],
        event: Message,
        data: Dict[str, Any],
    ) -> Any:
        if event.from_user:
            text = event.text or event.caption or ""
            kind = "photo" if event.photo else "text"
            logger.info(
                "chat=%s user=%s %s: %s",
                event.chat.id,
                event.from_user.id,
                kind,
                text[:200],
            )
        return await handler(event, data)
