import json
import logging

import pytest
import requests

from daily_drop.providers import chat
from daily_drop.providers.chat import ChatCompletionProvider, build_providers
from daily_drop.providers.errors import (
    EmptyCompletion,
    HttpError,
    MalformedJson,
    MissingCredential,
    RequestFailed,
)
from daily_drop.seasons import Hemisphere, Season
from daily_drop.settings import Settings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _provider(api_key="sk-test"):
    return ChatCompletionProvider("Test", "https://llm.example/v1/chat/completions", "test-model", api_key)


def _call(provider):
    return provider.generate("2024-06-15", Season.SUMMER, Hemisphere.NORTHERN, "SYSTEM")


def test_missing_key_fails_without_network(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("network must not be touched")

    monkeypatch.setattr(chat.requests, "post", boom)
    with pytest.raises(MissingCredential):
        _call(_provider(api_key=""))
    with pytest.raises(MissingCredential):
        _call(_provider(api_key=None))


def test_request_shape_and_parsed_document(monkeypatch):
    captured = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        captured.update(url=url, headers=headers, body=json, timeout=timeout)
        return FakeResponse(payload=_completion('{"title": "Summer Cool Blend"}'))

    monkeypatch.setattr(chat.requests, "post", fake_post)
    doc = _call(_provider())

    assert doc == {"title": "Summer Cool Blend"}
    assert captured["url"] == "https://llm.example/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    body = captured["body"]
    assert body["model"] == "test-model"
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 500
    assert body["messages"][0] == {"role": "system", "content": "SYSTEM"}
    user = body["messages"][1]["content"]
    assert "2024-06-15" in user and "Northern" in user and "Summer" in user
    assert captured["timeout"] == 30.0


def test_http_failure_carries_status_and_body(monkeypatch):
    monkeypatch.setattr(chat.requests, "post", lambda *a, **k: FakeResponse(429, text="rate limited"))
    with pytest.raises(HttpError) as exc:
        _call(_provider())
    assert exc.value.status == 429
    assert exc.value.body == "rate limited"
    assert exc.value.provider == "Test"


def test_transport_error_is_request_failed(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(chat.requests, "post", fake_post)
    with pytest.raises(RequestFailed):
        _call(_provider())


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": []},
        {"choices": [{"message": {"content": "   "}}]},
        {"choices": [{"message": {}}]},
        {},
    ],
)
def test_empty_completion(monkeypatch, payload):
    monkeypatch.setattr(chat.requests, "post", lambda *a, **k: FakeResponse(payload=payload))
    with pytest.raises(EmptyCompletion):
        _call(_provider())


@pytest.mark.parametrize("content", ["Here is your blend!", "[1, 2, 3]", '{"title": '])
def test_malformed_completion(monkeypatch, content):
    monkeypatch.setattr(chat.requests, "post", lambda *a, **k: FakeResponse(payload=_completion(content)))
    with pytest.raises(MalformedJson):
        _call(_provider())


def test_non_json_envelope_is_malformed(monkeypatch):
    monkeypatch.setattr(chat.requests, "post", lambda *a, **k: FakeResponse(payload=None, text="<html>"))
    with pytest.raises(MalformedJson):
        _call(_provider())


def test_fenced_completion_is_accepted(monkeypatch):
    content = "```json\n" + json.dumps({"title": "Fenced"}) + "\n```"
    monkeypatch.setattr(chat.requests, "post", lambda *a, **k: FakeResponse(payload=_completion(content)))
    assert _call(_provider()) == {"title": "Fenced"}


def test_build_providers_keeps_fixed_order():
    cfg = Settings(OPENAI_API_KEY="a", GROQ_API_KEY="", DEEPSEEK_API_KEY="c", REQUEST_TIMEOUT="12")
    providers = build_providers(cfg)
    assert [p.name for p in providers] == ["OpenAI", "Groq", "DeepSeek"]
    assert [p.configured for p in providers] == [True, False, True]
    assert providers[0].url == chat.OPENAI_URL
    assert providers[1].url == chat.GROQ_URL
    assert providers[2].url == chat.DEEPSEEK_URL
    assert all(p.timeout == 12.0 for p in providers)


def test_bad_timeout_falls_back_with_warning(caplog):
    cfg = Settings(REQUEST_TIMEOUT="soon")
    with caplog.at_level(logging.WARNING, logger="daily_drop.settings"):
        assert cfg.timeout_seconds == 30.0
    assert "DAILY_DROP_TIMEOUT" in caplog.text
