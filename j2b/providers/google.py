"""Google Gemini generateContent provider."""

from j2b.models import ChatCompletionRequest
from j2b.providers.base import ModelProvider

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_ROLES = {"user": "user", "assistant": "model"}


class GoogleProvider(ModelProvider):
    name = "google"

    def _complete(self, request: ChatCompletionRequest) -> str:
        system = "\n\n".join(m.content for m in request.messages if m.role == "system")
        body: dict = {
            "contents": [
                {"role": _ROLES[m.role], "parts": [{"text": m.content}]} for m in request.messages if m.role != "system"
            ],
            "generationConfig": {
                "temperature": self._temperature(request),
                "maxOutputTokens": self._max_tokens(request),
            },
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}

        data = self._post(
            f"{self._base_url(BASE_URL)}/models/{self.model}:generateContent",
            body,
            {"x-goog-api-key": self._api_key},
        )
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)
