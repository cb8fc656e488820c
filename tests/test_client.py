import asyncio
import json

import httpx
import pytest

from domain.errors import ModelsExhaustedError
from infra.llm import client
from infra.llm.client import generate_content, invoke_models
from tests.conftest import fake_generate

GOOD = '{"score": 81, "summary": "Strong React background", "strengths": ["React"], "risks": []}'


def test_first_successful_model_stops_the_loop():
    generate = fake_generate({"pro": GOOD, "flash": GOOD})
    result = asyncio.run(invoke_models("prompt", ["pro", "flash"], generate))
    assert result.model_used == "pro"
    assert result.attempts == ["pro", "flash"]
    assert result.failure_notes == []
    assert generate.calls == ["pro"]


def test_failures_are_recorded_and_next_model_is_tried():
    generate = fake_generate({
        "pro": RuntimeError("quota exceeded"),
        "flash": "```json\n" + GOOD + "\n```",
    })
    result = asyncio.run(invoke_models("prompt", ["pro", "flash"], generate))
    assert result.model_used == "flash"
    assert result.payload.rounded_score() == 81
    assert result.failure_notes == ["model=pro -> quota exceeded"]
    assert generate.calls == ["pro", "flash"]


def test_all_models_failing_raises_aggregated_error():
    generate = fake_generate({
        "pro": "I cannot answer that",
        "flash": '{"score": "n/a", "summary": "x"}',
    })
    with pytest.raises(ModelsExhaustedError) as info:
        asyncio.run(invoke_models("prompt", ["pro", "flash"], generate))
    err = info.value
    assert err.attempts == ["pro", "flash"]
    assert len(err.failure_notes) == 2
    assert err.failure_notes[0].startswith("model=pro -> Model response was not valid JSON")
    assert err.failure_notes[1].startswith("model=flash -> ")
    assert str(err) == " | ".join(err.failure_notes)
    assert err.raw_response_preview == '{"score": "n/a", "summary": "x"}'


def test_generate_content_posts_json_request(monkeypatch):
    monkeypatch.setattr(client.settings, "GEMINI_API_KEY", "secret")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": GOOD}]}}],
        })

    text = asyncio.run(generate_content(
        "evaluate this", "gemini-test", transport=httpx.MockTransport(handler)))
    assert text == GOOD
    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "secret"
    assert seen["body"]["generationConfig"] == {"responseMimeType": "application/json"}
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "evaluate this"


def test_generate_content_raises_on_client_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "bad"}))
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(generate_content("p", "m", transport=transport))


def test_generate_content_rejects_blocked_prompt():
    transport = httpx.MockTransport(lambda request: httpx.Response(
        200, json={"promptFeedback": {"blockReason": "SAFETY"}}))
    with pytest.raises(ValueError, match="SAFETY"):
        asyncio.run(generate_content("p", "m", transport=transport))


@pytest.fixture
def no_backoff(monkeypatch):
    delays = []

    async def _sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(client.asyncio, "sleep", _sleep)
    return delays


def _counting_transport(responses):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        reply = responses[min(len(calls), len(responses)) - 1]
        if isinstance(reply, Exception):
            raise reply
        return reply

    return httpx.MockTransport(handler), calls


def _ok():
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": GOOD}]}}]})


def test_transient_errors_are_retried_with_backoff(monkeypatch, no_backoff):
    monkeypatch.setattr(client.settings, "LLM_MAX_ATTEMPTS", 3)
    transport, calls = _counting_transport([httpx.Response(503), httpx.Response(503), _ok()])
    assert asyncio.run(generate_content("p", "m", transport=transport)) == GOOD
    assert len(calls) == 3
    assert no_backoff == [1.0, 2.0]


def test_client_errors_are_not_retried(monkeypatch, no_backoff):
    monkeypatch.setattr(client.settings, "LLM_MAX_ATTEMPTS", 3)
    transport, calls = _counting_transport([httpx.Response(400), _ok()])
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(generate_content("p", "m", transport=transport))
    assert len(calls) == 1
    assert no_backoff == []


def test_transport_errors_give_up_after_max_attempts(monkeypatch, no_backoff):
    monkeypatch.setattr(client.settings, "LLM_MAX_ATTEMPTS", 3)
    transport, calls = _counting_transport([httpx.ConnectError("connection refused")])
    with pytest.raises(httpx.ConnectError):
        asyncio.run(generate_content("p", "m", transport=transport))
    assert len(calls) == 3
