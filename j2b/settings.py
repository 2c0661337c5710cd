"""Settings resolution with named profile support."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import tomlkit
import typer
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from j2b.models import GenerationConfig, ProviderKind

CONFIG_PATH = Path.home() / ".config" / "j2b" / "config.toml"


class J2bSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="J2B_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_profile: str | None = None

    # Jira
    jira_host: str | None = None  # company.atlassian.net
    jira_email: str | None = None
    jira_token: SecretStr | None = None

    # Git
    default_branch_prefix: str | None = None
    base_branch: str = "main"  # PR commits are collected from base..HEAD

    # AI
    ai_provider: ProviderKind = "openai"
    ai_api_key: SecretStr | None = None
    ai_model: str | None = None  # None → provider default
    ai_temperature: float = Field(default=0.3, ge=0, le=2)
    ai_max_tokens: int = Field(default=500, ge=1, le=4000)
    ai_base_url: str | None = None  # required for azure
    ai_organization_id: str | None = None
    ai_request_timeout: float = 15.0
    allow_fallback: bool = True

    # Legacy key, read when ai_api_key is unset
    openai_api_key: SecretStr | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Profile values arrive as init kwargs; env vars and .env must win over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    def api_key(self) -> SecretStr | None:
        return self.ai_api_key or self.openai_api_key

    def generation_config(self) -> GenerationConfig:
        return GenerationConfig(
            provider=self.ai_provider,
            api_key=self.api_key(),
            model=self.ai_model or "",
            temperature=self.ai_temperature,
            max_tokens=self.ai_max_tokens,
            base_url=self.ai_base_url,
            organization_id=self.ai_organization_id,
            request_timeout=self.ai_request_timeout,
            allow_fallback=self.allow_fallback,
        )


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/j2b/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    return tomlkit.load(CONFIG_PATH.open())


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def get_settings(profile: str | None = None) -> J2bSettings:
    """Resolve the active profile and return fully populated J2bSettings.

    Precedence for the profile name (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. J2B_DEFAULT_PROFILE env var
    3. default_profile key in ~/.config/j2b/config.toml
    4. First profile defined in ~/.config/j2b/config.toml

    Env vars and .env always override values from the profile block.
    """
    toml_config = _load_toml()

    active = (
        profile
        or os.environ.get("J2B_DEFAULT_PROFILE")
        or toml_config.get("default_profile")
        or ((_profiles := _list_profiles(toml_config)) and _profiles[0] or None)
    )

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = toml_config[active].unwrap()
        else:
            profiles = _list_profiles(toml_config)
            typer.echo(f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}")
            raise typer.Exit(1)

    return J2bSettings(**profile_defaults)
