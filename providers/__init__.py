"""LLM Provider abstraction and the fallback ladder."""

from .base import LLMProvider, LLMResponse, ResponseParseError
from .ladder import AttemptOutcome, LadderAttempt, LadderResult, LadderWork, ProviderLadder
from .factory import build_provider_ladder, get_provider, list_providers

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "ResponseParseError",
    "AttemptOutcome",
    "LadderAttempt",
    "LadderResult",
    "LadderWork",
    "ProviderLadder",
    "build_provider_ladder",
    "get_provider",
    "list_providers",
]
