from __future__ import annotations

from functools import lru_cache

from app.core.llm.openai_client import OpenAIClient, OpenAIConfig
from app.core.settings import get_settings


@lru_cache
def get_openai_client() -> OpenAIClient | None:
    """
    Dependency provider for OpenAIClient.

    Returns None when not configured so the coach route can answer in stub mode
    instead of raising during dependency resolution. The client is built once per
    process and never mutated afterwards.
    """

    settings = get_settings()
    if not settings.openai_api_key:
        return None

    config = OpenAIConfig(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        timeout_seconds=float(settings.openai_timeout_seconds),
    )
    return OpenAIClient(config=config)
