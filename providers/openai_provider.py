"""OpenAI and OpenAI-compatible provider implementations."""

import os
from typing import Optional

from .base import LLMProvider, LLMResponse


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI models."""

    MODELS = {
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "gpt-4-turbo": "gpt-4-turbo",
        "gpt-4.1": "gpt-4.1",
        "gpt-4.1-mini": "gpt-4.1-mini",
        "o1": "o1",
        "o1-mini": "o1-mini",
    }
    API_KEY_ENV = "OPENAI_API_KEY"
    BASE_URL: Optional[str] = None
    FALLBACK_MODEL = "gpt-4o-mini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key. Uses the provider's env var (OPENAI_API_KEY) if not provided.
            model: Model or alias used when complete() gets none.
            timeout: Request timeout in seconds handed to the client; None keeps the SDK default.
        """
        self.api_key = api_key or os.environ.get(self.API_KEY_ENV)
        self._model = model
        self.timeout = timeout
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return self._resolve_model(self._model) if self._model else self.FALLBACK_MODEL

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            options = {"api_key": self.api_key, "max_retries": 0}
            if self.BASE_URL:
                options["base_url"] = self.BASE_URL
            if self.timeout is not None:
                options["timeout"] = self.timeout
            self._client = OpenAI(**options)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
        if model is None:
            return self.default_model
        return self.MODELS.get(model, model)

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        client = self._get_client()
        resolved_model = self._resolve_model(model)

        response = client.chat.completions.create(
            model=resolved_model,
            max_tokens=max_tokens,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
        )

        return LLMResponse(
            content=response.choices[0].message.content or "",
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)


class DeepseekProvider(OpenAIProvider):
    """Provider for Deepseek models (OpenAI-compatible API)."""

    MODELS = {
        "deepseek-chat": "deepseek-chat",
        "deepseek-coder": "deepseek-coder",
        "deepseek-reasoner": "deepseek-reasoner",
    }
    API_KEY_ENV = "DEEPSEEK_API_KEY"
    BASE_URL = "https://api.deepseek.com/v1"
    FALLBACK_MODEL = "deepseek-chat"

    @property
    def name(self) -> str:
        return "deepseek"
