from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from habitflow import __version__
from habitflow.config import Settings, settings as default_settings
from habitflow.db.session import Database
from habitflow.services.errors import AIResponseError, ToggleConflictError
from habitflow.services.llm import GeminiClient

from . import ai, habits

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    gemini: Optional[GeminiClient] = None,
) -> FastAPI:
    """Build the HTTP API; handles not passed in are created from settings."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database(settings.DATABASE_URL)
        client = gemini or GeminiClient.from_settings(settings)
        db.open()
        await db.create_all(reset=settings.RESET_DB_ON_START)
        app.state.database = db
        app.state.gemini = client
        logger.info("HabitFlow API ready")
        try:
            yield
        finally:
            await client.aclose()
            await db.close()
            logger.info("HabitFlow API stopped")

    app = FastAPI(title="HabitFlow API", version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.include_router(habits.router)
    app.include_router(ai.router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.exception_handler(ToggleConflictError)
    async def toggle_conflict_handler(request: Request, exc: ToggleConflictError):
        logger.warning("%s", exc)
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(AIResponseError)
    async def ai_response_handler(request: Request, exc: AIResponseError):
        logger.error("AI response rejected on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": "AI service returned an invalid response"})

    @app.exception_handler(httpx.HTTPError)
    async def ai_transport_handler(request: Request, exc: httpx.HTTPError):
        logger.error("AI request failed on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=502, content={"detail": "AI service unavailable"})

    return app
