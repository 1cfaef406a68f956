"""Application configuration using pydantic-settings.

Loads secrets from environment variables and .env file.
Judge behavior config (models, temperatures, output caps, escalation rules)
loaded from oversight.toml.

Priority: CLI args > Environment variables (.env) > oversight.toml > hardcoded defaults
"""

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from metacog.schemas.evaluation import Dimension


# ---------------------------------------------------------------------------
# Judge settings from oversight.toml
# ---------------------------------------------------------------------------


class JudgeConfig(BaseModel):
    """Base configuration for a single oracle role."""

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    groq_model: str = ""     # Role-specific Groq model override
    ollama_model: str = ""   # Role-specific Ollama model override


class FactualAccuracyJudgeConfig(JudgeConfig):
    temperature: float = 0.1
    max_tokens: int = 1000


class ReasoningQualityJudgeConfig(JudgeConfig):
    temperature: float = 0.1
    max_tokens: int = 1000


class RelevanceJudgeConfig(JudgeConfig):
    temperature: float = 0.1
    max_tokens: int = 800


class CompletenessJudgeConfig(JudgeConfig):
    temperature: float = 0.1
    max_tokens: int = 800


class SuggestionsConfig(JudgeConfig):
    """Improvement suggestion synthesis: moderate temperature for rewording."""

    temperature: float = 0.3
    max_tokens: int = 1000


class RegenerationConfig(JudgeConfig):
    temperature: float = 0.3
    max_tokens: int = 1500


class JudgesTable(BaseModel):
    """The [judges] table from oversight.toml."""

    factual_accuracy: FactualAccuracyJudgeConfig = Field(
        default_factory=FactualAccuracyJudgeConfig
    )
    reasoning_quality: ReasoningQualityJudgeConfig = Field(
        default_factory=ReasoningQualityJudgeConfig
    )
    relevance: RelevanceJudgeConfig = Field(default_factory=RelevanceJudgeConfig)
    completeness: CompletenessJudgeConfig = Field(
        default_factory=CompletenessJudgeConfig
    )
    suggestions: SuggestionsConfig = Field(default_factory=SuggestionsConfig)
    regeneration: RegenerationConfig = Field(default_factory=RegenerationConfig)


class DefaultsTable(BaseModel):
    """The [defaults] table from oversight.toml."""

    model: str = "meta-llama/llama-4-maverick"
    timeout: float = 60.0            # seconds, per oracle call
    min_response_length: int = 1     # shorter replies cascade to the next provider


class RetryConfig(BaseModel):
    """The [retry] table from oversight.toml."""

    max_attempts: int = 3
    initial_interval: float = 1.0
    backoff_factor: float = 2.0


class ProviderConfig(BaseModel):
    """Configuration for a single fallback provider."""

    enabled: bool = False
    default_model: str = ""
    base_url: str = ""


class ProvidersTable(BaseModel):
    """The [providers] table from oversight.toml."""

    groq: ProviderConfig = Field(default_factory=ProviderConfig)
    ollama: ProviderConfig = Field(default_factory=ProviderConfig)


class RegenerationTable(BaseModel):
    """The [regeneration] table from oversight.toml."""

    max_context_documents: int = Field(default=3, ge=0)


class EscalationConfig(BaseModel):
    """The [escalation] table from oversight.toml."""

    confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    session_prefix: str = "metacognitive-review"
    participant_ids: list[str] = Field(default_factory=lambda: ["oversight-reviewers"])
    dimension_floors: dict[Dimension, float] = Field(
        default_factory=lambda: {Dimension.FACTUAL_ACCURACY: 0.4}
    )


class OversightSettings(BaseModel):
    """Configuration loaded from oversight.toml."""

    defaults: DefaultsTable = Field(default_factory=DefaultsTable)
    judges: JudgesTable = Field(default_factory=JudgesTable)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    providers: ProvidersTable = Field(default_factory=ProvidersTable)
    regeneration: RegenerationTable = Field(default_factory=RegenerationTable)
    escalation: EscalationConfig = Field(default_factory=EscalationConfig)

    def get_judge_config(self, role: str) -> JudgeConfig:
        """Get the config for a specific oracle role."""
        return getattr(self.judges, role, JudgeConfig())

    def get_model(self, role: str) -> str:
        """Get the resolved model for a role (role-specific > defaults)."""
        return self.get_judge_config(role).model or self.defaults.model

    def get_temperature(self, role: str) -> float:
        """Get the resolved temperature for a role."""
        judge_cfg = self.get_judge_config(role)
        if judge_cfg.temperature is not None:
            return judge_cfg.temperature
        return 0.1  # evaluation calls stay near-deterministic

    def get_max_tokens(self, role: str) -> int | None:
        return self.get_judge_config(role).max_tokens

    def get_groq_model(self, role: str) -> str:
        """Get Groq model: role-specific > providers.groq.default_model."""
        return self.get_judge_config(role).groq_model or self.providers.groq.default_model

    def get_ollama_model(self, role: str) -> str:
        """Get Ollama model: role-specific > providers.ollama.default_model."""
        return (
            self.get_judge_config(role).ollama_model
            or self.providers.ollama.default_model
        )


_OVERSIGHT_SETTINGS_CACHE: OversightSettings | None = None

OVERSIGHT_TOML_PATH = Path(__file__).parent.parent / "oversight.toml"


def load_oversight_settings(path: Path) -> OversightSettings:
    """Parse an oversight.toml file (defaults when the file is absent)."""
    if not path.exists():
        return OversightSettings()
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return OversightSettings.model_validate(data)


def get_oversight_settings() -> OversightSettings:
    """Load and cache oversight settings from oversight.toml."""
    global _OVERSIGHT_SETTINGS_CACHE
    if _OVERSIGHT_SETTINGS_CACHE is None:
        _OVERSIGHT_SETTINGS_CACHE = load_oversight_settings(OVERSIGHT_TOML_PATH)
    return _OVERSIGHT_SETTINGS_CACHE


# ---------------------------------------------------------------------------
# Environment settings from .env (API keys, secrets, env-var overrides)
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Keys
    openrouter_api_key: str
    groq_api_key: str = ""  # Optional: Groq fallback provider

    # LangSmith (set LANGCHAIN_TRACING_V2=true to enable)
    langchain_tracing_v2: bool = False
    langchain_api_key: str | None = None
    langchain_project: str = "metacog"

    # OpenRouter base URL
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Also exports LangSmith env vars so the LangChain SDK
    picks them up automatically for tracing.
    """
    settings = Settings()

    # LangSmith tracing is driven by env vars read by langchain-core.
    if settings.langchain_tracing_v2:
        os.environ.setdefault("LANGCHAIN_TRACING_V2", "true")
        if settings.langchain_api_key:
            os.environ.setdefault("LANGCHAIN_API_KEY", settings.langchain_api_key)
        os.environ.setdefault("LANGCHAIN_PROJECT", settings.langchain_project)

    return settings
