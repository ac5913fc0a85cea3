from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class HabitSuggestion(BaseModel):
    """One habit proposed by the model."""

    model_config = ConfigDict(extra="ignore", strict=True)

    name: str = Field(min_length=1)
    icon: str
    color: str = Field(pattern=r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


class SuggestRequest(BaseModel):
    goals: str = Field(min_length=1)


class MotivationRequest(BaseModel):
    habit_name: str = Field(min_length=1)


class MotivationResponse(BaseModel):
    text: Optional[str] = None


class ProofEditRequest(BaseModel):
    image: str = Field(min_length=1)
    prompt: str = Field(min_length=1)


class ProofEditResponse(BaseModel):
    image: Optional[str] = None


class GeminiInlineData(BaseModel):
    data: str = ""
    mime_type: str = Field(default="image/png", validation_alias=AliasChoices("mimeType", "mime_type"))


class GeminiPart(BaseModel):
    text: Optional[str] = None
    inline_data: Optional[GeminiInlineData] = Field(
        default=None, validation_alias=AliasChoices("inlineData", "inline_data")
    )


class GeminiContent(BaseModel):
    parts: Optional[List[GeminiPart]] = None


class GeminiCandidate(BaseModel):
    content: Optional[GeminiContent] = None


class GeminiResponse(BaseModel):
    """Envelope of a ``generateContent`` response; unknown fields are ignored."""

    candidates: Optional[List[GeminiCandidate]] = None

    def first_parts(self) -> List[GeminiPart]:
        if not self.candidates or self.candidates[0].content is None:
            return []
        return self.candidates[0].content.parts or []
