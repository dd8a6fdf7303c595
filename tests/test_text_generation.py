"""Tests for the HTTP text-generation client (no network)."""

import asyncio

import requests

from retrodeck.core.text_generation import API_URL, AnthropicTextGenerator


class _FakeResponse:
    def __init__(self, payload=None, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_returns_first_text_block(monkeypatch):
    gen = AnthropicTextGenerator(model="test-model")
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers))
        return _FakeResponse({"content": [{"type": "text", "text": '{"faceBottom":"Jump"}'}]})

    monkeypatch.setattr(gen.session, "post", fake_post)
    text = asyncio.run(gen("prompt", "sk-ant-test"))

    assert text == '{"faceBottom":"Jump"}'
    url, payload, headers = calls[0]
    assert url == API_URL
    assert payload["model"] == "test-model"
    assert payload["messages"] == [{"role": "user", "content": "prompt"}]
    assert headers == {"x-api-key": "sk-ant-test"}
    assert gen.session.headers["anthropic-version"]
    gen.close()


def test_http_error_returns_none(monkeypatch):
    gen = AnthropicTextGenerator()
    monkeypatch.setattr(gen.session, "post", lambda *a, **kw: _FakeResponse({}, status=401))
    assert asyncio.run(gen("prompt", "bad-key")) is None


def test_bad_body_returns_none(monkeypatch):
    gen = AnthropicTextGenerator()
    monkeypatch.setattr(gen.session, "post", lambda *a, **kw: _FakeResponse(None))
    assert asyncio.run(gen("prompt", "key")) is None


def test_no_text_block(monkeypatch):
    gen = AnthropicTextGenerator()
    monkeypatch.setattr(gen.session, "post", lambda *a, **kw: _FakeResponse({"content": []}))
    assert asyncio.run(gen("prompt", "key")) is None
