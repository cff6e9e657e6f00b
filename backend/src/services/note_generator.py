"""Generate a random creative note through a text-generation provider.

OpenAI is used when ``OPENAI_API_KEY`` is configured, Gemini otherwise. The
provider is asked for a JSON object with ``title`` and ``content``; the result
is saved through :class:`NoteService` like any other note.
"""

from __future__ import annotations

import json
import logging
import random
import re
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..models.note import GeneratedNote
from .authorization import Principal
from .clock import Clock, elapsed_ms, epoch_ms
from .config import AppConfig, get_config
from .errors import ExternalServiceError
from .events import ActivityEvent, EventBus
from .notes import NoteService

logger = logging.getLogger(__name__)

TOPICS = [
    "a productivity tip",
    "a motivational quote with explanation",
    "a creative writing prompt",
    "a fun fact about science",
    "a mindfulness exercise",
    "a life hack for daily routine",
    "a book recommendation with summary",
    "a recipe for a simple dish",
    "a travel destination with highlights",
    "a coding best practice",
]

SYSTEM_PROMPT = (
    "You are a creative note-taking assistant. Generate helpful, interesting, "
    "and well-structured notes. Be concise but informative."
)

DEFAULT_TITLE = "Random Note"
DEFAULT_CONTENT = "No content generated."

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


def build_prompt(topic: str) -> str:
    return (
        f"Generate a note about {topic}. Format it as JSON with two fields: "
        '"title" (a short catchy title, max 60 characters) and "content" '
        "(detailed content, 2-4 paragraphs). Make it practical and engaging."
    )


def parse_note_json(text: str) -> tuple[str, str]:
    """Extract ``(title, content)`` from provider output.

    Markdown code fences around the JSON are tolerated. Raises ValueError for
    anything that is not a JSON object.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_RE.sub("", cleaned)
    parsed = json.loads(cleaned)
    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object with title and content")
    title = parsed.get("title") or DEFAULT_TITLE
    content = parsed.get("content") or DEFAULT_CONTENT
    return str(title), str(content)


@dataclass
class GenerationResult:
    title: str
    content: str
    model: str
    tokens_used: int = 0


class NoteGenerator:
    """Ask a provider for a note and save it to the caller's workspace."""

    OPENAI_API_BASE = "https://api.openai.com/v1"
    GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        notes: NoteService,
        *,
        config: AppConfig | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ):
        self.notes = notes
        self.config = config or get_config()
        self._events = event_bus or EventBus()
        self._clock = clock or epoch_ms
        self._transport = transport
        self._rng = rng or random.Random()

    @property
    def provider(self) -> Optional[str]:
        if self.config.openai_api_key:
            return "openai"
        if self.config.gemini_api_key:
            return "gemini"
        return None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.generator_timeout_seconds, transport=self._transport
        )

    async def _generate_with_openai(self, topic: str) -> GenerationResult:
        payload: Dict[str, Any] = {
            "model": self.config.openai_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(topic)},
            ],
            "temperature": 0.8,
            "max_tokens": 500,
            "response_format": {"type": "json_object"},
        }
        async with self._client() as client:
            response = await client.post(
                f"{self.OPENAI_API_BASE}/chat/completions",
                headers={"Authorization": f"Bearer {self.config.openai_api_key}"},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        text = data["choices"][0]["message"]["content"]
        if not text:
            raise ValueError("No content generated from OpenAI")
        title, content = parse_note_json(text)
        tokens = (data.get("usage") or {}).get("total_tokens") or 0
        return GenerationResult(title, content, self.config.openai_model, tokens)

    async def _generate_with_gemini(self, topic: str) -> GenerationResult:
        prompt = f"{SYSTEM_PROMPT}\n\n{build_prompt(topic)}\n\nReturn ONLY valid JSON, no additional text."
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        async with self._client() as client:
            response = await client.post(
                f"{self.GEMINI_API_BASE}/models/{self.config.gemini_model}:generateContent",
                headers={"x-goog-api-key": self.config.gemini_api_key or ""},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        parts = data["candidates"][0]["content"].get("parts", [])
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise ValueError("No content generated from Gemini")
        title, content = parse_note_json(text)
        tokens = (data.get("usageMetadata") or {}).get("totalTokenCount") or 0
        return GenerationResult(title, content, self.config.gemini_model, tokens)

    async def generate(self, principal: Principal, topic: str | None = None) -> GeneratedNote:
        """Generate a note about ``topic`` (random if omitted) and save it."""
        started = self._clock()
        topic = topic or self._rng.choice(TOPICS)

        provider = self.provider
        if provider is None:
            raise ExternalServiceError(
                "No AI API key is set. Please set either OPENAI_API_KEY or "
                "GEMINI_API_KEY environment variable."
            )

        try:
            if provider == "openai":
                result = await self._generate_with_openai(topic)
            else:
                result = await self._generate_with_gemini(topic)
            note = self.notes.create(principal, result.title, result.content)
        except (
            httpx.HTTPError,
            sqlite3.Error,
            ValueError,
            KeyError,
            IndexError,
            TypeError,
        ) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("Note generation via %s failed: %s", provider, message)
            self._events.emit(
                ActivityEvent(
                    type="error",
                    operation="ai.generateRandomNote",
                    user_id=principal.user_id,
                    data={"error": message, "topic": topic},
                    execution_time=elapsed_ms(self._clock, started),
                )
            )
            raise ExternalServiceError(
                f"Failed to generate note: {message}", detail={"topic": topic}
            ) from exc

        self._events.emit(
            ActivityEvent(
                type="mutation",
                operation="ai.generateRandomNote",
                user_id=principal.user_id,
                data={
                    "noteId": note.id,
                    "topic": topic,
                    "model": result.model,
                    "tokensUsed": result.tokens_used,
                },
                execution_time=elapsed_ms(self._clock, started),
            )
        )
        return GeneratedNote(title=result.title, content=result.content)


__all__ = [
    "NoteGenerator",
    "GenerationResult",
    "TOPICS",
    "parse_note_json",
    "build_prompt",
]
