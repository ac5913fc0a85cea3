from __future__ import annotations


class HabitFlowError(Exception):
    """Base class for domain errors."""


class ToggleConflictError(HabitFlowError):
    """Concurrent toggles for the same habit and day could not be reconciled."""

    def __init__(self, habit_id: int, day) -> None:
        super().__init__(f"Conflicting completion toggle for habit {habit_id} on {day}")
        self.habit_id = habit_id
        self.day = day


class AIResponseError(HabitFlowError):
    """Upstream model returned a payload of unexpected shape."""
