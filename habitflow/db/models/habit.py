from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


class Habit(Base):
    """User-defined recurring activity."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    emoji: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    frequency: Mapped[str] = mapped_column(String(16), default="daily", server_default="daily")
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    def __repr__(self):
        return f"<Habit(id={self.id}, name='{self.name}')>"


class Completion(Base):
    """Habit done on a calendar date, optionally with a proof image."""

    __table_args__ = (UniqueConstraint("habit_id", "completed_at", name="uq_completion_habit_day"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # Без ON DELETE: каскад выполняется в services.habits.delete_habit
    habit_id: Mapped[Optional[int]] = mapped_column(ForeignKey("habit.id"), index=True)
    completed_at: Mapped[date] = mapped_column(Date, nullable=False)
    proof_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<Completion(id={self.id}, habit_id={self.habit_id}, completed_at={self.completed_at})>"
