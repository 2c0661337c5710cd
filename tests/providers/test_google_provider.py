"""Tests for GoogleProvider using pytest-httpx."""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from j2b.errors import ProviderError
from j2b.models import ChatCompletionRequest, ChatMessage, GenerationConfig
from j2b.providers.google import BASE_URL, GoogleProvider

URL = f"{BASE_URL}/models/gemini-1.5-flash:generateContent"


def _provider() -> GoogleProvider:
    return GoogleProvider(GenerationConfig(provider="google", api_key="g-test"))  # type: ignore[arg-type]


def _request() -> ChatCompletionRequest:
    return ChatCompletionRequest(
        messages=[
            ChatMessage(role="system", content="Be brief."),
            ChatMessage(role="user", content="Name it"),
            ChatMessage(role="assistant", content="fix-bug"),
            ChatMessage(role="user", content="Shorter"),
        ],
        temperature=0.2,
        max_tokens=50,
    )


class TestCreateChatCompletion:
    def test_returns_candidate_text(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=URL,
            json={"candidates": [{"content": {"role": "model", "parts": [{"text": "fix-auth"}]}}]},
        )
        assert _provider().create_chat_completion(_request()).content == "fix-auth"

    def test_request_shape(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})
        _provider().create_chat_completion(_request())

        sent = httpx_mock.get_request()
        assert sent.headers["x-goog-api-key"] == "g-test"
        body = json.loads(sent.content)
        assert body["systemInstruction"] == {"parts": [{"text": "Be brief."}]}
        assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
        assert body["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 50}

    def test_no_candidates(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, json={"promptFeedback": {"blockReason": "SAFETY"}})
        with pytest.raises(ProviderError, match="unexpected response shape"):
            _provider().create_chat_completion(_request())

    def test_timeout(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=URL)
        with pytest.raises(ProviderError, match="google API error"):
            _provider().create_chat_completion(_request())

    def test_string_parts_are_a_shape_error(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, json={"candidates": [{"content": {"parts": ["oops"]}}]})
        with pytest.raises(ProviderError, match="unexpected response shape"):
            _provider().create_chat_completion(_request())
