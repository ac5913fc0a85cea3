from .habit import (
    CompletionRead,
    CompletionToggle,
    HabitCreate,
    HabitCreated,
    HabitRead,
    HabitsStatus,
    HabitStat,
    HabitsToday,
    HabitWithStatus,
    ToggleResult,
    ToggleStatus,
)
from .ai import (
    GeminiPart,
    GeminiResponse,
    HabitSuggestion,
    MotivationRequest,
    MotivationResponse,
    ProofEditRequest,
    ProofEditResponse,
    SuggestRequest,
)

__all__ = [
    "CompletionRead",
    "CompletionToggle",
    "HabitCreate",
    "HabitCreated",
    "HabitRead",
    "HabitsStatus",
    "HabitStat",
    "HabitsToday",
    "HabitWithStatus",
    "ToggleResult",
    "ToggleStatus",
    "GeminiPart",
    "GeminiResponse",
    "HabitSuggestion",
    "MotivationRequest",
    "MotivationResponse",
    "ProofEditRequest",
    "ProofEditResponse",
    "SuggestRequest",
]
