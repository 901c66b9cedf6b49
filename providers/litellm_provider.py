"""LiteLLM-backed provider: one rung that can reach any LiteLLM-supported model."""

from typing import Optional

from .base import LLMProvider, LLMResponse


# Map provider + optional model alias -> LiteLLM model string
MODEL_ALIASES = {
    "anthropic": {
        None: "anthropic/claude-sonnet-4-20250514",
        "claude-sonnet": "anthropic/claude-sonnet-4-20250514",
        "claude-opus": "anthropic/claude-opus-4-20250514",
        "claude-haiku": "anthropic/claude-3-5-haiku-20241022",
    },
    "openai": {
        None: "gpt-4o-mini",
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "gpt-4.1": "gpt-4.1",
    },
    "gemini": {
        None: "gemini/gemini-2.0-flash",
        "gemini-2.0-flash": "gemini/gemini-2.0-flash",
        "gemini-2.5-flash": "gemini/gemini-2.5-flash",
        "gemini-2.5-pro": "gemini/gemini-2.5-pro",
    },
    "deepseek": {
        None: "deepseek/deepseek-chat",
        "deepseek-chat": "deepseek/deepseek-chat",
        "deepseek-reasoner": "deepseek/deepseek-reasoner",
    },
}


def to_litellm_model(model: str) -> str:
    """Map a bare model alias to a LiteLLM model string.

    Strings that already carry a provider prefix (``anthropic/...``) pass through.
    """
    if "/" in model:
        return model
    model_lower = model.lower()
    for aliases in MODEL_ALIASES.values():
        # Prefer longest alias match first (e.g. gpt-4o-mini before gpt-4o)
        for alias in sorted((a for a in aliases if a), key=len, reverse=True):
            if model_lower == alias or model_lower.startswith(alias + "-"):
                return aliases[alias]
    return model


class LiteLLMProvider(LLMProvider):
    """Single provider that delegates to litellm.completion()."""

    def __init__(
        self,
        default_model: str,
        metadata: Optional[dict] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize with the LiteLLM model string to use by default.

        Args:
            default_model: LiteLLM model string (e.g. gpt-4o-mini, anthropic/claude-sonnet-4-20250514).
            metadata: Optional dict passed to litellm (e.g. stage name) for tracing.
            timeout: Request timeout in seconds passed to litellm.completion().
        """
        self._default_model = to_litellm_model(default_model) if default_model else ""
        self._metadata = metadata or {}
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "litellm"

    @property
    def default_model(self) -> str:
        return self._default_model

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        import litellm

        resolved_model = to_litellm_model(model) if model else self._default_model
        response = litellm.completion(
            model=resolved_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            max_tokens=max_tokens,
            metadata={**self._metadata},
            timeout=self.timeout,
            num_retries=0,
        )

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        hidden = getattr(response, "_hidden_params", None) or {}

        return LLMResponse(
            content=content,
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            model=getattr(response, "model", None) or resolved_model,
            provider=self.name,
            cost=float(hidden.get("response_cost", 0) or 0),
        )

    def is_available(self) -> bool:
        """LiteLLM reads API keys from env; we consider it available if the model is set."""
        return bool(self._default_model)
