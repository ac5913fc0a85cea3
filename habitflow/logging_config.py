from __future__ import annotations

import logging
from logging import Logger
from typing import Optional

from .config import Settings, settings as default_settings


def setup_logging(settings: Optional[Settings] = None) -> Logger:
    """Configure root logger for the application."""
    settings = settings or default_settings
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx пишет каждый запрос на уровне INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLogger("habitflow")
