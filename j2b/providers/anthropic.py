"""Anthropic Messages API provider."""

from j2b.models import ChatCompletionRequest
from j2b.providers.base import ModelProvider

BASE_URL = "https://api.anthropic.com/v1"
API_VERSION = "2023-06-01"


class AnthropicProvider(ModelProvider):
    name = "anthropic"

    def _complete(self, request: ChatCompletionRequest) -> str:
        # System prompts are a top-level field, not a message role.
        system = "\n\n".join(m.content for m in request.messages if m.role == "system")
        body: dict = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages if m.role != "system"],
            "temperature": self._temperature(request),
            "max_tokens": self._max_tokens(request),
        }
        if system:
            body["system"] = system

        data = self._post(
            f"{self._base_url(BASE_URL)}/messages",
            body,
            {"x-api-key": self._api_key, "anthropic-version": API_VERSION},
        )
        return "".join(block["text"] for block in data["content"] if block.get("type") == "text")
