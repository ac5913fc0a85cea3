from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import Query, Request

from habitflow.config import Settings
from habitflow.db.session import Database
from habitflow.services.llm import GeminiClient
from habitflow.utils.timezone_utils import local_today


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_gemini(request: Request) -> GeminiClient:
    return request.app.state.gemini


def get_today(
    request: Request,
    day: Optional[date] = Query(default=None, alias="date"),
) -> date:
    """Client-supplied ``?date=`` or today by the server clock."""
    if day is not None:
        return day
    return local_today(request.app.state.settings.DEFAULT_TIMEZONE)
