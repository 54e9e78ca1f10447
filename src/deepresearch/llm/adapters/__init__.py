"""Generation adapters for multiple LLM providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .anthropic import AnthropicAdapter
from .base import AdapterAuthenticationError
from .openai_compat import OpenAICompatibleAdapter

if TYPE_CHECKING:
    from ...config import ResearchConfig
    from ..protocol import LanguageModel


def build_language_model(config: ResearchConfig) -> LanguageModel:
    """
    Construct the configured generation adapter.

    Raises:
        ValueError: If the API key is missing
    """
    model_config = config.model
    api_key = config.get_model_api_key()

    if model_config.provider == "anthropic":
        return AnthropicAdapter(
            model=model_config.name,
            api_key=api_key,
            api_key_env=model_config.resolved_api_key_env(),
            timeout=model_config.timeout_seconds,
            max_retries=model_config.max_retries,
            temperature=model_config.temperature,
        )

    return OpenAICompatibleAdapter(
        model=model_config.name,
        api_key=api_key,
        provider=model_config.provider,
        base_url=model_config.base_url,
        api_key_env=model_config.resolved_api_key_env(),
        timeout=model_config.timeout_seconds,
        max_retries=model_config.max_retries,
        temperature=model_config.temperature,
    )


__all__ = [
    "AdapterAuthenticationError",
    "AnthropicAdapter",
    "OpenAICompatibleAdapter",
    "build_language_model",
]
