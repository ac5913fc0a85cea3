import pytest

from habitflow.db.session import Database
from habitflow.schemas import HabitSuggestion

EDITED_PROOF = "data:image/png;base64,RURJVEVE"


class FakeGemini:
    """In-memory stand-in for GeminiClient."""

    def __init__(self):
        self.closed = False
        self.fail_with = None

    async def suggest_habits(self, goals):
        if self.fail_with:
            raise self.fail_with
        return [HabitSuggestion(name="Stretch", icon="🧘", color="#34C759")]

    async def get_motivation(self, habit_name):
        if self.fail_with:
            raise self.fail_with
        return f"Keep going with {habit_name}."

    async def edit_proof_image(self, image, prompt):
        if self.fail_with:
            raise self.fail_with
        return None if prompt == "nothing" else EDITED_PROOF

    async def aclose(self):
        self.closed = True


@pytest.fixture
def database(tmp_path) -> Database:
    """Unopened storage handle on a throwaway SQLite file."""
    return Database(f"sqlite+aiosqlite:///{tmp_path / 'habits.db'}")


@pytest.fixture
def gemini() -> FakeGemini:
    return FakeGemini()
