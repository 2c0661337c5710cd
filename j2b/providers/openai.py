"""OpenAI chat completions provider."""

from j2b.models import ChatCompletionRequest
from j2b.providers.base import ModelProvider

BASE_URL = "https://api.openai.com/v1"


class OpenAIProvider(ModelProvider):
    name = "openai"

    def _complete(self, request: ChatCompletionRequest) -> str:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        if self._config.organization_id:
            headers["OpenAI-Organization"] = self._config.organization_id
        data = self._post(
            f"{self._base_url(BASE_URL)}/chat/completions",
            {
                "model": self.model,
                "messages": [m.model_dump() for m in request.messages],
                "temperature": self._temperature(request),
                "max_completion_tokens": self._max_tokens(request),
            },
            headers,
        )
        return data["choices"][0]["message"]["content"] or ""
