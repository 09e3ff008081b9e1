from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "transition-coach-api"
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )

    # LLM integration (OpenAI)
    # A missing key is not a startup failure: the coach endpoint degrades to a stub reply.
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="OpenAI API key. When unset, POST /coach answers in stub mode.",
    )
    openai_model: str = Field(
        default="gpt-4.1-mini",
        validation_alias=AliasChoices("OPENAI_MODEL", "openai_model"),
        description="OpenAI model identifier used for coaching replies.",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL", "openai_base_url"),
        description="Base URL for OpenAI API (override for proxies/emulators).",
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        validation_alias=AliasChoices("OPENAI_TIMEOUT_SECONDS", "openai_timeout_seconds"),
        description="Timeout for OpenAI API requests (seconds).",
    )

    # Generation parameters are fixed per deployment, never derived from the request.
    coach_max_tokens: int = Field(
        default=500,
        ge=1,
        validation_alias=AliasChoices("COACH_MAX_TOKENS", "coach_max_tokens"),
        description="Maximum number of tokens the model may produce per reply.",
    )
    coach_temperature: float = Field(
        default=0.6,
        ge=0.0,
        le=2.0,
        validation_alias=AliasChoices("COACH_TEMPERATURE", "coach_temperature"),
        description="Sampling temperature for coaching replies (mid-low for consistency).",
    )

    # Cross-origin headers emitted on every response.
    cors_allow_origin: str = Field(
        default="*",
        validation_alias=AliasChoices("CORS_ALLOW_ORIGIN", "cors_allow_origin"),
        description="Value of Access-Control-Allow-Origin.",
    )
    cors_allow_headers: str = Field(
        default="Content-Type",
        validation_alias=AliasChoices("CORS_ALLOW_HEADERS", "cors_allow_headers"),
        description="Value of Access-Control-Allow-Headers.",
    )
    cors_allow_methods: str = Field(
        default="GET,POST,OPTIONS",
        validation_alias=AliasChoices("CORS_ALLOW_METHODS", "cors_allow_methods"),
        description="Value of Access-Control-Allow-Methods.",
    )

    @property
    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
        }

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
