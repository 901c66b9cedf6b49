"""Tests for provider factory, LiteLLM model mapping and response parsing."""

import pytest
from unittest.mock import patch, MagicMock

from config import settings
from providers import LLMResponse, ResponseParseError, build_provider_ladder, get_provider, list_providers
from providers.anthropic_provider import AnthropicProvider
from providers.gemini_provider import GeminiProvider
from providers.litellm_provider import LiteLLMProvider, to_litellm_model
from providers.openai_provider import DeepseekProvider, OpenAIProvider
from providers.parsing import extract_json, find_json_text


class TestFactory:
    """Test get_provider and ladder construction."""

    def test_aliases_resolve(self):
        assert isinstance(get_provider("claude"), AnthropicProvider)
        assert isinstance(get_provider("gpt"), OpenAIProvider)
        assert isinstance(get_provider("deepseek"), DeepseekProvider)

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider("nonexistent")

    def test_provider_without_key_is_unavailable(self):
        assert not get_provider("openai").is_available()

    def test_explicit_key_makes_provider_available(self):
        assert get_provider("openai", api_key="sk-test").is_available()

    def test_settings_key_is_used(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", "sk-ant-test")
        assert get_provider("anthropic").is_available()

    def test_configured_model_is_default(self, monkeypatch):
        monkeypatch.setattr(settings, "openai_model", "gpt-4o")
        assert get_provider("openai").default_model == "gpt-4o"

    def test_build_ladder_follows_order(self):
        ladder = build_provider_ladder(["anthropic", "openai"], timeout_seconds=5)
        assert [p.name for p in ladder.providers] == ["anthropic", "openai"]
        assert ladder.timeout_seconds == 5

    def test_build_ladder_defaults_to_settings(self):
        ladder = build_provider_ladder()
        assert [p.name for p in ladder.providers] == list(settings.provider_order)
        assert ladder.timeout_seconds == settings.api_timeout_seconds

    def test_configured_timeout_reaches_providers(self, monkeypatch):
        monkeypatch.setattr(settings, "api_timeout_seconds", 12.0)
        assert get_provider("anthropic").timeout == 12.0
        assert get_provider("deepseek").timeout == 12.0
        assert get_provider("litellm").timeout == 12.0
        assert get_provider("gemini", timeout=3.0).timeout == 3.0

    def test_build_ladder_passes_timeout_to_clients(self):
        ladder = build_provider_ladder(["anthropic", "openai"], timeout_seconds=5)
        assert [p.timeout for p in ladder.providers] == [5, 5]

    def test_list_providers_skips_aliases(self):
        status = list_providers()
        assert "claude" not in status
        assert set(status) >= {"anthropic", "openai", "gemini", "deepseek", "litellm"}
        assert not any(status.values())


class TestToLiteLLMModel:
    """Test to_litellm_model mapping."""

    def test_prefixed_model_passes_through(self):
        assert to_litellm_model("anthropic/claude-opus-4-20250514") == "anthropic/claude-opus-4-20250514"

    def test_gemini_alias(self):
        assert to_litellm_model("gemini-2.5-pro") == "gemini/gemini-2.5-pro"

    def test_anthropic_alias(self):
        assert "haiku" in to_litellm_model("claude-haiku")

    def test_longest_alias_wins(self):
        assert to_litellm_model("gpt-4o-mini") == "gpt-4o-mini"

    def test_unknown_model_passes_through(self):
        assert to_litellm_model("my-local-model") == "my-local-model"


class TestLiteLLMProvider:
    """Test LiteLLMProvider with mocked litellm."""

    @pytest.fixture
    def mock_completion_response(self):
        resp = MagicMock()
        resp.choices = [MagicMock()]
        resp.choices[0].message.content = "Hello, world."
        resp.usage = MagicMock(prompt_tokens=10, completion_tokens=5)
        resp._hidden_params = {"response_cost": 0.001}
        resp.model = "gpt-4o-mini"
        return resp

    def test_complete_returns_llm_response(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response):
            provider = LiteLLMProvider(default_model="gpt-4o-mini")
            result = provider.complete("You are helpful.", "Hi", max_tokens=100)
        assert isinstance(result, LLMResponse)
        assert result.content == "Hello, world."
        assert result.input_tokens == 10
        assert result.output_tokens == 5
        assert result.cost == 0.001
        assert result.provider == "litellm"

    def test_complete_passes_metadata(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            provider = LiteLLMProvider(default_model="gpt-4o-mini", metadata={"stage": "classification"})
            provider.complete("Sys", "User")
        call_kw = mock_completion.call_args[1]
        assert call_kw.get("metadata") == {"stage": "classification"}
        assert call_kw["messages"][0] == {"role": "system", "content": "Sys"}

    def test_complete_passes_timeout_without_retries(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            LiteLLMProvider(default_model="gpt-4o-mini", timeout=7.5).complete("Sys", "User")
        call_kw = mock_completion.call_args[1]
        assert call_kw["timeout"] == 7.5
        assert call_kw["num_retries"] == 0

    def test_unavailable_without_model(self):
        assert not LiteLLMProvider(default_model="").is_available()
        assert LiteLLMProvider(default_model="gpt-4o-mini").is_available()

    def test_factory_uses_configured_litellm_model(self, monkeypatch):
        monkeypatch.setattr(settings, "litellm_model", "gemini-2.5-flash")
        provider = get_provider("litellm")
        assert provider.default_model == "gemini/gemini-2.5-flash"


class TestOpenAIProvider:
    """Test the OpenAI adapter with a mocked client."""

    def test_complete_maps_response(self):
        provider = OpenAIProvider(api_key="sk-test", model="gpt-4o")
        response = MagicMock()
        response.choices[0].message.content = "answer"
        response.usage.prompt_tokens = 3
        response.usage.completion_tokens = 4
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value = response

        result = provider.complete("sys", "user", max_tokens=50)

        assert result.content == "answer"
        assert result.model == "gpt-4o"
        call_kw = provider._client.chat.completions.create.call_args[1]
        assert call_kw["max_tokens"] == 50

    def test_deepseek_uses_its_own_endpoint(self):
        provider = DeepseekProvider(api_key="sk-test")
        assert provider.name == "deepseek"
        assert provider.default_model == "deepseek-chat"
        assert provider.BASE_URL.startswith("https://api.deepseek.com")

    def test_client_gets_timeout_and_no_retries(self):
        with patch("openai.OpenAI") as client_cls:
            DeepseekProvider(api_key="sk-test", timeout=9.0)._get_client()
        call_kw = client_cls.call_args[1]
        assert call_kw["timeout"] == 9.0
        assert call_kw["max_retries"] == 0
        assert call_kw["base_url"] == DeepseekProvider.BASE_URL

    def test_client_without_timeout_keeps_sdk_default(self):
        with patch("openai.OpenAI") as client_cls:
            OpenAIProvider(api_key="sk-test")._get_client()
        assert "timeout" not in client_cls.call_args[1]


class TestClientTimeouts:
    """Request timeouts are enforced by the SDK clients themselves."""

    def test_anthropic_client(self):
        with patch("anthropic.Anthropic") as client_cls:
            AnthropicProvider(api_key="sk-ant-test", timeout=4.0)._get_client()
        client_cls.assert_called_once_with(api_key="sk-ant-test", max_retries=0, timeout=4.0)

    def test_gemini_client_uses_milliseconds(self):
        with patch("google.genai.Client") as client_cls:
            GeminiProvider(api_key="g-test", timeout=2.5)._get_client()
        assert client_cls.call_args[1]["http_options"].timeout == 2500


class TestParsing:
    """Test JSON extraction from replies."""

    def test_json_fence(self):
        assert extract_json('Here:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_bare_object(self):
        assert extract_json('prefix {"a": {"b": 2}} suffix') == {"a": {"b": 2}}

    def test_untagged_fence(self):
        assert find_json_text('```\n{"x": true}\n```') == '{"x": true}'

    def test_no_json_raises(self):
        with pytest.raises(ResponseParseError):
            extract_json("no braces here")

    def test_invalid_json_raises(self):
        with pytest.raises(ResponseParseError):
            extract_json("{not: valid}")
