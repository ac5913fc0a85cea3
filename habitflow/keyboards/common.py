from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from habitflow.schemas import HabitWithStatus

TOGGLE_PREFIX = "habit_toggle:"
DELETE_PREFIX = "habit_delete:"
REFRESH = "habits_refresh"


def habit_label(habit: HabitWithStatus) -> str:
    mark = "✅" if habit.completed_today else "⬜"
    emoji = f"{habit.emoji} " if habit.emoji else ""
    proof = " 📷" if habit.proof_image_url else ""
    return f"{mark} {emoji}{habit.name}{proof}"


def habits_keyboard(habits: Sequence[HabitWithStatus]) -> InlineKeyboardMarkup:
    rows = [
        [
            InlineKeyboardButton(text=habit_label(h), callback_data=f"{TOGGLE_PREFIX}{h.id}"),
            InlineKeyboardButton(text="🗑", callback_data=f"{DELETE_PREFIX}{h.id}"),
        ]
        for h in habits
    ]
    rows.append([InlineKeyboardButton(text="🔄 Обновить", callback_data=REFRESH)])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def parse_habit_id(data: str, prefix: str) -> int | None:
    """Habit id from callback data like ``habit_toggle:12``."""
    if not data.startswith(prefix):
        return None
    try:
        return int(data[len(prefix):])
    except ValueError:
        return None
