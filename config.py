"""Configuration settings for the Integration Composer."""

# Load .env into os.environ so provider fallbacks (e.g. OPENAI_API_KEY) work
from dotenv import load_dotenv

load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Dict, List


class Settings(BaseSettings):
    """Global settings for the composer.

    Settings can be overridden via environment variables with COMPOSER_ prefix.
    Example: COMPOSER_MAX_REFINEMENT_ROUNDS=3
    """

    # Provider ladder
    provider_order: List[str] = Field(
        default=["openai", "anthropic"],
        description="Reasoning providers tried in order before the rule-based fallback",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model used by the OpenAI rung of the ladder",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model used by the Anthropic rung of the ladder",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Model used by the Gemini rung of the ladder",
    )
    deepseek_model: str = Field(
        default="deepseek-chat",
        description="Model used by the Deepseek rung of the ladder",
    )
    litellm_model: str = Field(
        default="",
        description="LiteLLM model string; the litellm rung is absent while empty",
    )

    # Token limits
    classification_max_tokens: int = Field(
        default=2000,
        description="Maximum tokens for a classification call",
    )
    generation_max_tokens: int = Field(
        default=4000,
        description="Maximum tokens for strategy, generation and refinement calls",
    )

    # API settings (env: COMPOSER_<KEY> or standard env var)
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key for Claude (env: COMPOSER_ANTHROPIC_API_KEY)",
    )
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (env: COMPOSER_OPENAI_API_KEY)",
    )
    google_api_key: str = Field(
        default="",
        description="Google/Gemini API key (env: COMPOSER_GOOGLE_API_KEY)",
    )
    deepseek_api_key: str = Field(
        default="",
        description="Deepseek API key (env: COMPOSER_DEEPSEEK_API_KEY)",
    )
    api_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Per-call timeout; an expired call counts as one provider failure",
    )

    # Refinement
    max_refinement_rounds: int = Field(
        default=2,
        ge=0,
        description="Maximum refinement rounds before reporting a quality shortfall",
    )
    refinement_quality_threshold: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Overall quality score at which refinement is skipped",
    )
    refinement_confidence_increment: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Confidence added to an artifact after a successful refinement",
    )
    fallback_artifact_confidence: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Confidence assigned to deterministic placeholder artifacts",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
    )

    model_config = {
        "env_prefix": "COMPOSER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. OPENAI_API_KEY) not in schema
    }

    def model_for(self, provider_name: str) -> str:
        """Configured model for a ladder rung, empty when none is set."""
        return {
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
            "gemini": self.gemini_model,
            "deepseek": self.deepseek_model,
            "litellm": self.litellm_model,
        }.get(provider_name.lower(), "")

    def api_key_for(self, provider_name: str) -> str:
        """Configured API key for a provider, empty when unset."""
        return {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "gemini": self.google_api_key,
            "deepseek": self.deepseek_api_key,
        }.get(provider_name.lower(), "")


# Agent-to-knowledge mapping: which static reference sections each stage sees
AGENT_KNOWLEDGE_MAPPING: Dict[str, List[str]] = {
    "classifier": ["industry_examples", "compliance_frameworks", "service_capabilities"],
    "strategy": ["service_capabilities", "template_inventory"],
    "generator": ["service_capabilities"],
    "refiner": ["service_capabilities", "compliance_frameworks"],
}


# Create singleton instance
settings = Settings()
