"""Tests for AnthropicProvider using pytest-httpx."""

import json

import pytest
from pytest_httpx import HTTPXMock

from j2b.errors import ProviderError
from j2b.fallback import generate_fallback
from j2b.models import ChatCompletionRequest, ChatMessage, GenerationConfig
from j2b.naming import generate
from j2b.providers.anthropic import API_VERSION, BASE_URL, AnthropicProvider

URL = f"{BASE_URL}/messages"


def _provider() -> AnthropicProvider:
    return AnthropicProvider(GenerationConfig(provider="anthropic", api_key="sk-ant-test"))  # type: ignore[arg-type]


def _request() -> ChatCompletionRequest:
    return ChatCompletionRequest(
        messages=[ChatMessage(role="system", content="Be brief."), ChatMessage(role="user", content="Name it")],
        max_tokens=50,
    )


class TestCreateChatCompletion:
    def test_joins_text_blocks(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=URL,
            json={"content": [{"type": "text", "text": "fix-"}, {"type": "text", "text": "auth-bug"}]},
        )
        assert _provider().create_chat_completion(_request()).content == "fix-auth-bug"

    def test_system_prompt_is_top_level(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, json={"content": [{"type": "text", "text": "ok"}]})
        _provider().create_chat_completion(_request())

        sent = httpx_mock.get_request()
        assert sent.headers["x-api-key"] == "sk-ant-test"
        assert sent.headers["anthropic-version"] == API_VERSION
        body = json.loads(sent.content)
        assert body["system"] == "Be brief."
        assert body["messages"] == [{"role": "user", "content": "Name it"}]
        assert body["model"] == "claude-3-5-sonnet-20241022"
        assert body["max_tokens"] == 50
        assert body["temperature"] == 0.3

    def test_no_text_blocks(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, json={"content": [{"type": "tool_use", "id": "x"}]})
        with pytest.raises(ProviderError, match="No response content from anthropic"):
            _provider().create_chat_completion(_request())

    def test_rate_limited(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, status_code=429, json={"error": {"type": "rate_limit_error"}})
        with pytest.raises(ProviderError, match="HTTP 429"):
            _provider().create_chat_completion(_request())

    def test_string_blocks_are_a_shape_error(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=URL, json={"content": ["oops"]})
        with pytest.raises(ProviderError, match="unexpected response shape"):
            _provider().create_chat_completion(_request())


def test_malformed_reply_falls_back_to_rule_based_name(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, json={"content": ["oops"]})
    config = GenerationConfig(provider="anthropic", api_key="sk-ant-test")  # type: ignore[arg-type]
    slug = generate("EH-1234", "Fix user authentication bug", config=config)
    assert slug == generate_fallback("EH-1234", "Fix user authentication bug")
