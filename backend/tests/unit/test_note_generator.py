"""Unit tests for NoteGenerator with mocked provider transports."""

import json
import random
import sqlite3

import httpx
import pytest

from backend.src.services.authorization import Principal
from backend.src.services.config import AppConfig
from backend.src.services.errors import ExternalServiceError
from backend.src.services.note_generator import TOPICS, NoteGenerator, parse_note_json

ALICE = Principal("alice", "teamA")


def _generator(services, app_config: AppConfig, clock, handler, **keys) -> NoteGenerator:
    config = app_config.model_copy(update=keys)
    return NoteGenerator(
        services.notes,
        config=config,
        event_bus=services.events,
        clock=clock,
        transport=httpx.MockTransport(handler),
        rng=random.Random(0),
    )


def _openai_reply(content, tokens: int = 42) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "choices": [{"message": {"content": content}}],
            "usage": {"total_tokens": tokens},
        },
    )


class TestParseNoteJson:
    def test_plain_object(self) -> None:
        assert parse_note_json('{"title": "Hi", "content": "Body"}') == ("Hi", "Body")

    def test_fenced_json_block(self) -> None:
        text = '```json\n{"title": "Hi", "content": "Body"}\n```'

        assert parse_note_json(text) == ("Hi", "Body")

    def test_missing_fields_fall_back_to_defaults(self) -> None:
        assert parse_note_json("{}") == ("Random Note", "No content generated.")

    def test_non_object_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_note_json('["title"]')

    def test_garbage_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_note_json("Sure! Here is your note.")


@pytest.mark.asyncio
async def test_openai_note_is_saved_and_logged(services, app_config, clock) -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return _openai_reply(json.dumps({"title": "Focus", "content": "Single-task."}))

    generator = _generator(services, app_config, clock, handler, openai_api_key="sk-test")

    result = await generator.generate(ALICE, topic="a productivity tip")

    assert result.title == "Focus"
    assert result.content == "Single-task."
    saved = services.notes.list("teamA")
    assert [(n.title, n.user_id) for n in saved] == [("Focus", "alice")]

    sent = requests[0]
    assert sent.url.path == "/v1/chat/completions"
    assert sent.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(sent.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["response_format"] == {"type": "json_object"}
    assert "a productivity tip" in body["messages"][1]["content"]

    entry = services.activity_log.list()[0]
    assert entry.operation == "ai.generateRandomNote"
    assert entry.type == "mutation"
    assert entry.data == {
        "noteId": saved[0].id,
        "topic": "a productivity tip",
        "model": "gpt-4o-mini",
        "tokensUsed": 42,
    }


@pytest.mark.asyncio
async def test_random_topic_comes_from_fixed_list(services, app_config, clock) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _openai_reply('{"title": "T", "content": "C"}')

    generator = _generator(services, app_config, clock, handler, openai_api_key="sk-test")

    await generator.generate(ALICE)

    assert services.activity_log.list()[0].data["topic"] in TOPICS


@pytest.mark.asyncio
async def test_gemini_used_when_only_gemini_key(services, app_config, clock) -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        text = '```json\n{"title": "Trip", "content": "Kyoto in spring."}\n```'
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
        )

    generator = _generator(services, app_config, clock, handler, gemini_api_key="gm-test")

    result = await generator.generate(ALICE, topic="a travel destination with highlights")

    assert generator.provider == "gemini"
    assert result.title == "Trip"
    assert requests[0].url.path == "/v1beta/models/gemini-2.5-pro:generateContent"
    assert requests[0].headers["x-goog-api-key"] == "gm-test"
    assert services.activity_log.list()[0].data["tokensUsed"] == 0


def test_openai_preferred_when_both_keys(services, app_config, clock) -> None:
    generator = _generator(
        services,
        app_config,
        clock,
        lambda request: _openai_reply("{}"),
        openai_api_key="sk-test",
        gemini_api_key="gm-test",
    )

    assert generator.provider == "openai"


@pytest.mark.asyncio
async def test_unparsable_output_logs_error_and_saves_nothing(
    services, app_config, clock
) -> None:
    generator = _generator(
        services,
        app_config,
        clock,
        lambda request: _openai_reply("not json at all"),
        openai_api_key="sk-test",
    )

    with pytest.raises(ExternalServiceError, match="Failed to generate note"):
        await generator.generate(ALICE, topic="a fun fact about science")

    assert services.notes.list("teamA") == []
    entry = services.activity_log.list()[0]
    assert entry.type == "error"
    assert entry.operation == "ai.generateRandomNote"
    assert entry.data["topic"] == "a fun fact about science"
    assert entry.data["error"]


@pytest.mark.asyncio
async def test_empty_output_is_a_failure(services, app_config, clock) -> None:
    generator = _generator(
        services, app_config, clock, lambda request: _openai_reply(""), openai_api_key="sk-test"
    )

    with pytest.raises(ExternalServiceError, match="No content generated from OpenAI"):
        await generator.generate(ALICE)


@pytest.mark.asyncio
async def test_provider_http_error_is_wrapped(services, app_config, clock) -> None:
    generator = _generator(
        services,
        app_config,
        clock,
        lambda request: httpx.Response(500, json={"error": "boom"}),
        openai_api_key="sk-test",
    )

    with pytest.raises(ExternalServiceError) as excinfo:
        await generator.generate(ALICE, topic="a recipe for a simple dish")

    assert excinfo.value.status_code == 502
    assert excinfo.value.detail == {"topic": "a recipe for a simple dish"}
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_missing_keys_raise_before_calling_provider(services, app_config, clock) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("provider must not be called")

    generator = _generator(services, app_config, clock, handler)

    with pytest.raises(ExternalServiceError, match="OPENAI_API_KEY"):
        await generator.generate(ALICE)

    assert services.activity_log.list() == []


@pytest.mark.asyncio
async def test_save_failure_logs_error_and_wraps(
    services, app_config, clock, monkeypatch
) -> None:
    def locked(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(services.notes, "create", locked)
    generator = _generator(
        services,
        app_config,
        clock,
        lambda request: _openai_reply('{"title": "T", "content": "C"}'),
        openai_api_key="sk-test",
    )

    with pytest.raises(ExternalServiceError, match="Failed to generate note: database is locked"):
        await generator.generate(ALICE, topic="a travel destination with highlights")

    entry = services.activity_log.list()[0]
    assert entry.type == "error"
    assert entry.operation == "ai.generateRandomNote"
    assert entry.data == {
        "error": "database is locked",
        "topic": "a travel destination with highlights",
    }
