"""Narrator backed by the Google Generative Language REST API."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from scorebook.errors import NarrativeGenerationError
from scorebook.narrative.narrator import fallback_summary
from scorebook.narrative.prompt import build_prompt

if TYPE_CHECKING:
    from scorebook.narrative.narrator import NarrativeRequest
    from scorebook.narrative.settings import NarrativeSettings

logger = structlog.get_logger()

_AUTH_STATUSES = {HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN}


def _extract_text(payload: Any) -> str:  # noqa: ANN401
    """Join the text parts of the first candidate. Raises on any other shape."""
    try:
        parts = payload["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise NarrativeGenerationError("Malformed response from narrative service") from exc
    text = text.strip()
    if not text:
        raise NarrativeGenerationError("Narrative service returned no text")
    return text


class GeminiNarrator:
    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: NarrativeSettings) -> GeminiNarrator:
        return cls(
            settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
        )

    async def generate(self, request: NarrativeRequest) -> str:
        try:
            return await self._generate(build_prompt(request))
        except NarrativeGenerationError as exc:
            logger.warning("game summary generation failed", error=str(exc))
            return fallback_summary(exc)
        except Exception as exc:
            logger.exception("unexpected error generating game summary")
            return fallback_summary(exc)

    async def _generate(self, prompt: str) -> str:
        if not self._api_key:
            raise NarrativeGenerationError("API_KEY environment variable is not set.")

        url = f"{self._base_url}/models/{self._model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, json=body, headers={"x-goog-api-key": self._api_key})
            except httpx.HTTPError as exc:
                raise NarrativeGenerationError(f"Narrative service unreachable: {exc}") from exc

        if response.status_code in _AUTH_STATUSES:
            raise NarrativeGenerationError(f"API key rejected (HTTP {response.status_code})")
        if response.status_code != HTTPStatus.OK:
            raise NarrativeGenerationError(f"Narrative service returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise NarrativeGenerationError("Malformed response from narrative service") from exc
        return _extract_text(payload)
