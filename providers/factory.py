"""Factory for creating LLM providers and the provider ladder."""

from typing import Dict, List, Optional, Sequence, Type

from config import settings
from .base import LLMProvider
from .anthropic_provider import AnthropicProvider
from .openai_provider import OpenAIProvider, DeepseekProvider
from .gemini_provider import GeminiProvider
from .litellm_provider import LiteLLMProvider
from .ladder import ProviderLadder


# Registry of available providers
PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "claude": AnthropicProvider,
    "openai": OpenAIProvider,
    "gpt": OpenAIProvider,
    "gemini": GeminiProvider,
    "google": GeminiProvider,
    "deepseek": DeepseekProvider,
    "litellm": LiteLLMProvider,
}

ALIASES = {"claude": "anthropic", "gpt": "openai", "google": "gemini"}


def get_provider(
    provider_name: str,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> LLMProvider:
    """Get an LLM provider instance.

    Args:
        provider_name: Provider name or alias (anthropic, openai, gemini, deepseek, litellm)
        model: Model for this provider; defaults to the configured model for the rung
        api_key: API key; defaults to settings, then the provider's standard env var
        timeout: Client request timeout in seconds; defaults to settings.api_timeout_seconds

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If the provider name is unknown.

    Examples:
        get_provider("openai")
        get_provider("anthropic", model="claude-haiku")
        get_provider("litellm", model="gemini-2.5-flash")
    """
    provider_key = provider_name.lower()
    if provider_key not in PROVIDERS:
        raise ValueError(
            f"Unknown provider: {provider_name}. "
            f"Available: {list(PROVIDERS.keys())}"
        )
    canonical = ALIASES.get(provider_key, provider_key)
    resolved_model = model or settings.model_for(canonical) or None
    resolved_timeout = timeout if timeout is not None else settings.api_timeout_seconds

    if canonical == "litellm":
        return LiteLLMProvider(default_model=resolved_model or "", timeout=resolved_timeout)

    return PROVIDERS[canonical](
        api_key=api_key or settings.api_key_for(canonical) or None,
        model=resolved_model,
        timeout=resolved_timeout,
    )


def build_provider_ladder(
    provider_order: Optional[Sequence[str]] = None,
    timeout_seconds: Optional[float] = None,
) -> ProviderLadder:
    """Build the ladder from configuration.

    Args:
        provider_order: Provider names in priority order. Defaults to settings.provider_order.
        timeout_seconds: Per-call timeout. Defaults to settings.api_timeout_seconds.
    """
    order = list(provider_order) if provider_order is not None else list(settings.provider_order)
    timeout = timeout_seconds if timeout_seconds is not None else settings.api_timeout_seconds
    providers: List[LLMProvider] = [get_provider(name, timeout=timeout) for name in order]
    return ProviderLadder(providers, timeout_seconds=timeout)


def list_providers() -> Dict[str, bool]:
    """List all providers and their availability.

    Returns:
        Dict mapping provider name to availability status
    """
    result = {}
    for name in PROVIDERS:
        # Skip aliases
        if name in ALIASES:
            continue
        result[name] = get_provider(name).is_available()
    return result
