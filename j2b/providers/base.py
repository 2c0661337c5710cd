"""Abstract base class for generative-model backends."""

import logging
from abc import ABC, abstractmethod

import httpx

from j2b.errors import ConfigurationError, ProviderError
from j2b.models import ChatCompletionRequest, ChatCompletionResponse, ChatMessage, GenerationConfig

logger = logging.getLogger(__name__)


class ModelProvider(ABC):
    """One chat-completion backend. Every variant shares the same request/response shape."""

    name: str = "model"
    requires_base_url: bool = False

    def __init__(self, config: GenerationConfig) -> None:
        api_key = config.secret()
        if not api_key:
            raise ConfigurationError(f"{self.name} requires an API key")
        if self.requires_base_url and not (config.base_url or "").strip():
            raise ConfigurationError(f"{self.name} requires base_url to be configured")
        self._config = config
        self._api_key = api_key

    @property
    def model(self) -> str:
        return self._config.model

    @abstractmethod
    def _complete(self, request: ChatCompletionRequest) -> str:
        """Send request and return the raw reply text."""

    def create_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        logger.debug("%s chat completion (model=%s, messages=%d)", self.name, self.model, len(request.messages))
        try:
            content = self._complete(request)
        except ProviderError:
            raise
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{self.name} API error: HTTP {exc.response.status_code} {exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name} API error: {exc}") from exc
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(f"{self.name} API error: unexpected response shape ({exc!r})") from exc

        if not content or not content.strip():
            raise ProviderError(f"No response content from {self.name}")
        return ChatCompletionResponse(content=content)

    def test_connection(self) -> bool:
        """Send a tiny request; True if the backend answered."""
        try:
            self.create_chat_completion(
                ChatCompletionRequest(messages=[ChatMessage(role="user", content="Hello")], max_tokens=5)
            )
        except ProviderError as exc:
            logger.debug("%s connection test failed: %s", self.name, exc)
            return False
        return True

    # Helpers for implementations

    def _temperature(self, request: ChatCompletionRequest) -> float:
        return self._config.temperature if request.temperature is None else request.temperature

    def _max_tokens(self, request: ChatCompletionRequest) -> int:
        return self._config.max_tokens if request.max_tokens is None else request.max_tokens

    def _base_url(self, default: str) -> str:
        return (self._config.base_url or default).rstrip("/")

    def _post(self, url: str, body: dict, headers: dict, params: dict | None = None) -> dict:
        response = httpx.post(
            url,
            json=body,
            headers={"Content-Type": "application/json", **headers},
            params=params,
            timeout=self._config.request_timeout,
        )
        response.raise_for_status()
        return response.json()
