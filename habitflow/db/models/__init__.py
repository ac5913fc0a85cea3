from .habit import Completion, Habit

__all__ = [
    "Habit",
    "Completion",
]
