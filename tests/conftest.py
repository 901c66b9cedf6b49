"""Shared fixtures: no real API keys, and scriptable fake providers."""

import time
from typing import Callable, List, Optional, Union

import pytest

from config import settings
from contracts import CompositionRequest, EnterpriseContext, Requirement
from providers import LLMProvider, LLMResponse, ProviderLadder


PROVIDER_ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "DEEPSEEK_API_KEY",
)


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    """Keep the suite off the network whatever the developer's shell exports."""
    for var in PROVIDER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    for field in ("openai_api_key", "anthropic_api_key", "google_api_key", "deepseek_api_key", "litellm_model"):
        monkeypatch.setattr(settings, field, "")


class FakeProvider(LLMProvider):
    """Provider that replays canned replies.

    replies may be a single string (returned every time), a list (returned in
    order, the last one repeating) or a callable taking the user message.
    """

    def __init__(
        self,
        name: str = "fake",
        replies: Union[str, List[str], Callable[[str], str]] = "",
        available: bool = True,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self._name = name
        self._replies = replies
        self._available = available
        self._error = error
        self._delay = delay
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def default_model(self) -> str:
        return "fake-model"

    def complete(self, system_prompt, user_message, model=None, max_tokens=4096):
        self.calls.append({"system_prompt": system_prompt, "user_message": user_message, "max_tokens": max_tokens})
        if self._delay:
            time.sleep(self._delay)
        if self._error is not None:
            raise self._error

        if callable(self._replies):
            content = self._replies(user_message)
        elif isinstance(self._replies, list):
            index = min(len(self.calls) - 1, len(self._replies) - 1)
            content = self._replies[index]
        else:
            content = self._replies
        return LLMResponse(content=content, input_tokens=1, output_tokens=1, model="fake-model", provider=self._name)

    def is_available(self) -> bool:
        return self._available


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def empty_ladder():
    """Ladder with no providers: every call takes the deterministic fallback."""
    return ProviderLadder([], timeout_seconds=1.0)


@pytest.fixture
def make_request():
    """Factory for CompositionRequest from text and optional context fields."""

    def _make(description: str, **context_fields) -> CompositionRequest:
        context = EnterpriseContext(**context_fields)
        return CompositionRequest(
            requirement=Requirement(description=description, context=context),
            context=context,
        )

    return _make
