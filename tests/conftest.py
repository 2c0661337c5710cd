"""Shared test fixtures."""

import os
from collections.abc import Callable

import pytest

from j2b.models import ChatCompletionRequest, GenerationConfig, Ticket, TicketContext
from j2b.providers.base import ModelProvider


class FakeProvider(ModelProvider):
    """In-memory backend: pops canned replies, or raises the given error."""

    name = "fake"

    def __init__(self, config: GenerationConfig, replies: list[str] | None = None, error: Exception | None = None):
        super().__init__(config)
        self.replies = list(replies or [])
        self.error = error
        self.requests: list[ChatCompletionRequest] = []

    def _complete(self, request: ChatCompletionRequest) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep J2B_* variables from the developer's shell out of every test."""
    for key in list(os.environ):
        if key.startswith("J2B_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config() -> GenerationConfig:
    return GenerationConfig(provider="openai", api_key="sk-test")  # type: ignore[arg-type]


@pytest.fixture
def offline_config() -> GenerationConfig:
    return GenerationConfig()


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    def _make(config: GenerationConfig, replies: list[str] | None = None, error: Exception | None = None):
        return FakeProvider(config, replies=replies, error=error)

    return _make


@pytest.fixture
def ticket_context() -> TicketContext:
    return TicketContext(
        id="EH-1234",
        summary="Fix user authentication bug",
        description="Login fails when the session token has expired.",
    )


@pytest.fixture
def jira_ticket() -> Ticket:
    return Ticket(
        key="EH-1234",
        summary="Fix user authentication bug",
        description="Login fails when the session token has expired.",
        issue_type="Bug",
        status="In Progress",
        priority="High",
        assignee="Jane Doe",
        url="https://acme.atlassian.net/browse/EH-1234",
    )
