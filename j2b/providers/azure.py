"""Azure OpenAI provider.

base_url is the deployment URL, e.g.
https://RESOURCE.openai.azure.com/openai/deployments/DEPLOYMENT
"""

from j2b.models import ChatCompletionRequest
from j2b.providers.base import ModelProvider

API_VERSION = "2024-06-01"


class AzureProvider(ModelProvider):
    name = "azure"
    requires_base_url = True

    def _complete(self, request: ChatCompletionRequest) -> str:
        data = self._post(
            f"{self._base_url('')}/chat/completions",
            {
                "messages": [m.model_dump() for m in request.messages],
                "temperature": self._temperature(request),
                "max_tokens": self._max_tokens(request),
            },
            {"api-key": self._api_key},
            params={"api-version": API_VERSION},
        )
        return data["choices"][0]["message"]["content"] or ""
