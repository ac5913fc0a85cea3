from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToggleStatus(str, Enum):
    completed = "completed"
    updated = "updated"
    uncompleted = "uncompleted"


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    emoji: Optional[str] = None
    color: Optional[str] = None


class HabitCreated(BaseModel):
    id: int


class HabitRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None
    frequency: str = "daily"
    created_at: datetime


class CompletionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    habit_id: Optional[int]
    completed_at: date
    proof_image_url: Optional[str] = None


class CompletionToggle(BaseModel):
    habit_id: int
    date: date
    proof_image_url: Optional[str] = None


class ToggleResult(BaseModel):
    status: ToggleStatus


class HabitsToday(BaseModel):
    """Raw list view: every habit plus completions dated today."""

    habits: List[HabitRead]
    completions: List[CompletionRead]


class HabitWithStatus(HabitRead):
    completed_today: bool = False
    proof_image_url: Optional[str] = None


class HabitsStatus(BaseModel):
    date: date
    progress: int
    habits: List[HabitWithStatus]


class HabitStat(BaseModel):
    name: str
    completion_count: int
