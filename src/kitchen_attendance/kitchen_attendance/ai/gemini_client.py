"""HTTP client for the Gemini `generateContent` REST endpoint."""

from __future__ import annotations

import base64
import json
from typing import Any, Optional

import httpx

from ..core.exceptions import ExternalServiceError

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"


class GeminiClient:
    """Simple async wrapper around the generateContent endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.model = model
        self._client = httpx.AsyncClient(
            base_url=GEMINI_API_BASE,
            headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def generate_text(self, parts: list[dict[str, Any]], *, response_schema: Optional[dict] = None) -> str:
        body: dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if response_schema is not None:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }

        method = f"models/{self.model}:generateContent"
        try:
            response = await self._client.post(method, json=body)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ExternalServiceError(f"Gemini {method} failed: {exc}") from exc

        if not isinstance(data, dict):
            raise ExternalServiceError("Gemini answered with an unexpected document")

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback")
            reason = feedback.get("blockReason", "no_candidates") if isinstance(feedback, dict) else "no_candidates"
            raise ExternalServiceError(f"Gemini returned no answer: {reason}")
        return _candidate_text(candidates)

    async def generate_json(self, parts: list[dict[str, Any]], *, response_schema: dict) -> dict[str, Any]:
        text = await self.generate_text(parts, response_schema=response_schema)
        try:
            result = json.loads(text or "{}")
        except ValueError as exc:
            raise ExternalServiceError("Gemini answered with malformed JSON") from exc
        if not isinstance(result, dict):
            raise ExternalServiceError("Gemini answered with a non-object JSON document")
        return result


def _candidate_text(candidates: Any) -> str:
    """Concatenated text of the first candidate; raises ExternalServiceError on any other shape."""

    first = candidates[0] if isinstance(candidates, list) else None
    content = first.get("content") if isinstance(first, dict) else None
    parts = (content.get("parts") or []) if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise ExternalServiceError("Gemini answer has no content parts")

    texts = []
    for part in parts:
        text = part.get("text", "") if isinstance(part, dict) else None
        if not isinstance(text, str):
            raise ExternalServiceError("Gemini answer part is not text")
        texts.append(text)
    return "".join(texts)


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def jpeg_part(image_jpeg: bytes) -> dict[str, Any]:
    return {"inlineData": {"mimeType": "image/jpeg", "data": base64.b64encode(image_jpeg).decode("ascii")}}


__all__ = ["GeminiClient", "text_part", "jpeg_part", "DEFAULT_MODEL"]
