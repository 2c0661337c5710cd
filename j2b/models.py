"""Pydantic records exchanged by the naming core, the providers and the CLI."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator
from pydantic.alias_generators import to_camel

ProviderKind = Literal["openai", "anthropic", "google", "azure"]

DEFAULT_PROVIDER_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-20241022",
    "google": "gemini-1.5-flash",
    "azure": "gpt-4",
}


class TicketContext(BaseModel):
    """The minimal work-item record that drives name generation."""

    model_config = ConfigDict(frozen=True)

    id: str  # tracker key, e.g. EH-1234
    summary: str
    description: str | None = None


class Ticket(BaseModel):
    """A Jira issue as fetched by the tracker client, with display fields."""

    model_config = ConfigDict(frozen=True)

    key: str
    summary: str
    description: str | None = None
    issue_type: str | None = None
    status: str | None = None
    priority: str | None = None
    assignee: str | None = None
    url: str | None = None

    def context(self) -> TicketContext:
        return TicketContext(id=self.key, summary=self.summary, description=self.description)


class GenerationConfig(BaseModel):
    """Tunables resolved once per invocation and passed by value into the core."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderKind = "openai"
    api_key: SecretStr | None = None
    model: str = ""  # empty → provider default
    temperature: float = Field(default=0.3, ge=0, le=2)
    max_tokens: int = Field(default=500, ge=1, le=4000)
    summary_temperature: float = Field(default=0.2, ge=0, le=2)
    summary_max_tokens: int = Field(default=50, ge=1)
    base_url: str | None = None
    organization_id: str | None = None
    request_timeout: float = Field(default=15.0, gt=0)
    allow_fallback: bool = True

    @model_validator(mode="before")
    @classmethod
    def _default_model(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("model"):
            provider = data.get("provider") or "openai"
            data = {**data, "model": DEFAULT_PROVIDER_MODELS.get(provider, DEFAULT_PROVIDER_MODELS["openai"])}
        return data

    def secret(self) -> str | None:
        return self.api_key.get_secret_value() if self.api_key else None


class TokenAnalysis(BaseModel):
    """Intermediate result of the rule-based generator. Sets are kept as ordered lists."""

    model_config = ConfigDict(frozen=True)

    tokens: list[str]
    actions: list[str]
    entities: list[str]
    tech_terms: list[str]
    primary_action: str | None
    ranked_tokens: list[str]


class TicketAnalysis(BaseModel):
    """Structured answer of the analysis call. Parses the model's camelCase JSON."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    primary_action: str
    technical_context: list[str] = []
    business_context: list[str] = []
    suggested_branch_name: str = ""
    reasoning: str = ""


class GeneratedIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    analysis: TicketAnalysis | None = None


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class ChatCompletionRequest(BaseModel):
    """One chat call. None for temperature/max_tokens means use the provider config."""

    model_config = ConfigDict(frozen=True)

    messages: list[ChatMessage]
    temperature: float | None = None
    max_tokens: int | None = None


class ChatCompletionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
