"""Provider factory keyed by the configured provider tag."""

from j2b.errors import ConfigurationError
from j2b.models import GenerationConfig
from j2b.providers.anthropic import AnthropicProvider
from j2b.providers.azure import AzureProvider
from j2b.providers.base import ModelProvider
from j2b.providers.google import GoogleProvider
from j2b.providers.openai import OpenAIProvider

PROVIDER_NAMES = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "google": "Google",
    "azure": "Azure OpenAI",
}


def create_model_provider(config: GenerationConfig) -> ModelProvider:
    match config.provider:
        case "openai":
            return OpenAIProvider(config)
        case "anthropic":
            return AnthropicProvider(config)
        case "google":
            return GoogleProvider(config)
        case "azure":
            return AzureProvider(config)
        case _:
            raise ConfigurationError(f"Unsupported AI provider '{config.provider}'. Valid: {', '.join(PROVIDER_NAMES)}")
