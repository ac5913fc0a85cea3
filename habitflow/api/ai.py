from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from habitflow.schemas import (
    HabitSuggestion,
    MotivationRequest,
    MotivationResponse,
    ProofEditRequest,
    ProofEditResponse,
    SuggestRequest,
)
from habitflow.services.llm import GeminiClient

from .dependencies import get_gemini

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/suggestions", response_model=List[HabitSuggestion])
async def suggestions(payload: SuggestRequest, gemini: GeminiClient = Depends(get_gemini)) -> List[HabitSuggestion]:
    return await gemini.suggest_habits(payload.goals)


@router.post("/motivation", response_model=MotivationResponse)
async def motivation(payload: MotivationRequest, gemini: GeminiClient = Depends(get_gemini)) -> MotivationResponse:
    return MotivationResponse(text=await gemini.get_motivation(payload.habit_name))


@router.post("/proof-edit", response_model=ProofEditResponse)
async def proof_edit(payload: ProofEditRequest, gemini: GeminiClient = Depends(get_gemini)) -> ProofEditResponse:
    """Edited image as a data URI; store it through POST /api/complete."""
    return ProofEditResponse(image=await gemini.edit_proof_image(payload.image, payload.prompt))
