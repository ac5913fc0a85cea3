from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import pytz


def get_local_time(tz_name: Optional[str]) -> datetime:
    """
    Current time in ``tz_name``.
    Unknown or empty zone names fall back to UTC.
    """
    utc_now = datetime.now(timezone.utc)
    if not tz_name:
        return utc_now
    try:
        return utc_now.astimezone(pytz.timezone(tz_name))
    except pytz.exceptions.UnknownTimeZoneError:
        return utc_now


def local_today(tz_name: Optional[str]) -> date:
    """Calendar date "today" as seen by the server clock in ``tz_name``."""
    return get_local_time(tz_name).date()


def format_day(day: date) -> str:
    return day.strftime("%d.%m.%Y")
