from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from habitflow.config import Settings
from habitflow.schemas import GeminiPart, GeminiResponse, HabitSuggestion
from habitflow.services.errors import AIResponseError

logger = logging.getLogger(__name__)

_suggestions_adapter = TypeAdapter(List[HabitSuggestion])

SUGGESTIONS_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING"},
            "icon": {"type": "STRING"},
            "color": {"type": "STRING"},
        },
        "required": ["name", "icon", "color"],
    },
}


def split_data_uri(data_uri: str) -> tuple[str, str]:
    """Return ``(mime_type, base64_payload)`` of a ``data:`` URI.

    Anything without a comma is treated as a bare base64 PNG payload.
    """
    if "," not in data_uri:
        return "image/png", data_uri
    header, payload = data_uri.split(",", 1)
    mime_type = "image/png"
    if header.startswith("data:"):
        mime_type = header[len("data:"):].split(";", 1)[0] or mime_type
    return mime_type, payload


class GeminiClient:
    """Thin client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        text_model: str = "gemini-3-flash-preview",
        image_model: str = "gemini-2.5-flash-image",
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.text_model = text_model
        self.image_model = image_model
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            base_url=settings.GEMINI_BASE_URL,
            text_model=settings.GEMINI_TEXT_MODEL,
            image_model=settings.GEMINI_IMAGE_MODEL,
            timeout=settings.GEMINI_TIMEOUT,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def generate_content(self, model: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        r = await self._client.post(f"/models/{model}:generateContent", headers=self._headers, json=payload)
        r.raise_for_status()
        try:
            data = r.json()
        except ValueError as e:
            raise AIResponseError(f"Non-JSON response from {model}") from e
        if not isinstance(data, dict):
            raise AIResponseError(f"Unexpected response from {model}: {type(data).__name__}")
        return data

    @staticmethod
    def _parts(data: Dict[str, Any]) -> List[GeminiPart]:
        """Content parts of the first candidate, or an empty list."""
        try:
            response = GeminiResponse.model_validate(data)
        except ValidationError as e:
            raise AIResponseError(f"Malformed response envelope: {e.error_count()} error(s)") from e
        return response.first_parts()

    @classmethod
    def _text(cls, data: Dict[str, Any]) -> Optional[str]:
        texts = [p.text for p in cls._parts(data) if p.text is not None]
        if not texts:
            return None
        return "".join(texts)

    async def suggest_habits(self, goals: str) -> List[HabitSuggestion]:
        """Ask for 3-5 daily habits serving ``goals``; validated list, possibly empty."""
        payload = {
            "contents": [
                {
                    "parts": [
                        {
                            "text": (
                                f'Based on these goals: "{goals}", suggest 3-5 daily habits. '
                                'Return them as a JSON array of objects with "name", '
                                '"icon" (a single emoji), and "color" (hex).'
                            )
                        }
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": SUGGESTIONS_SCHEMA,
            },
        }
        data = await self.generate_content(self.text_model, payload)
        text = self._text(data)
        if not text or not text.strip():
            logger.info("Model returned no suggestions for goals %r", goals)
            return []
        try:
            suggestions = _suggestions_adapter.validate_json(text)
        except ValidationError as e:
            raise AIResponseError(f"Invalid habit suggestions: {e.error_count()} error(s)") from e
        logger.info("Model suggested %d habit(s)", len(suggestions))
        return suggestions

    async def get_motivation(self, habit_name: str) -> Optional[str]:
        payload = {
            "contents": [
                {
                    "parts": [
                        {
                            "text": (
                                "Give me a short, punchy, Apple-style motivational quote for someone "
                                f'tracking their "{habit_name}" habit. Keep it under 15 words.'
                            )
                        }
                    ]
                }
            ]
        }
        data = await self.generate_content(self.text_model, payload)
        text = self._text(data)
        return text.strip() if text else None

    async def edit_proof_image(self, image_data_uri: str, prompt: str) -> Optional[str]:
        """Edit a proof image; returns a ``data:`` URI or None if no image came back."""
        mime_type, image_data = split_data_uri(image_data_uri)
        payload = {
            "contents": [
                {
                    "parts": [
                        {"inlineData": {"data": image_data, "mimeType": mime_type}},
                        {"text": prompt},
                    ]
                }
            ]
        }
        data = await self.generate_content(self.image_model, payload)
        for part in self._parts(data):
            if part.inline_data is not None and part.inline_data.data:
                return f"data:{part.inline_data.mime_type};base64,{part.inline_data.data}"
        logger.info("Image model returned no inline image")
        return None
