# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: provider
credentials, cache/usage/profile backends, and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDER ===
    llm_provider: Literal["openai", "anthropic"] = "openai"
    llm_model: str = "gpt-4.1-2025-04-14"
    # Retried once when the primary model fails or returns nothing ("" disables)
    llm_secondary_model: str = "gpt-4o-mini"

    # Provider API keys
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "json", "sqlite", "redis"] = "sqlite"
    cache_root: Path = Path("~/.nexora_ai/cache")
    cache_redis_url: str = ""

    # === Usage metering ===
    usage_backend: Literal["memory", "jsonl", "sqlite"] = "jsonl"
    usage_log_path: Path = Path("~/.nexora_ai/usage/ai_usage.jsonl")

    # === Caller profiles ===
    profile_backend: Literal["memory", "sqlite"] = "sqlite"
    profile_db_path: Path = Path("~/.nexora_ai/profiles.db")

    # === Orchestration ===
    store_timeout_s: float = 2.0
    fingerprint_length: int = 32
    cost_default_per_1k: float = 0.01

    # === Auth ===
    # Comma-separated "token:caller_id" pairs for the static identity provider
    auth_tokens: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("fingerprint_length")
    @classmethod
    def validate_fingerprint_length(cls, v: int) -> int:  # noqa: N805
        if not 8 <= v <= 64:
            raise ValueError("fingerprint_length must be between 8 and 64")
        return v

    @field_validator("store_timeout_s")
    @classmethod
    def validate_store_timeout(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("store_timeout_s must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_enabled and self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        for pair in self._split(self.auth_tokens):
            token, sep, caller = pair.partition(":")
            if not sep or not token.strip() or not caller.strip():
                errors.append(f"AUTH_TOKENS entry {pair!r} must be 'token:caller_id'")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @staticmethod
    def _split(value: str) -> list[str]:
        return [p.strip() for p in value.split(",") if p.strip()]

    @property
    def auth_token_map(self) -> dict[str, str]:
        """Parse AUTH_TOKENS into a token -> caller_id mapping."""
        result: dict[str, str] = {}
        for pair in self._split(self.auth_tokens):
            token, _, caller = pair.partition(":")
            result[token.strip()] = caller.strip()
        return result

    @property
    def provider_api_key(self) -> str:
        """API key for the configured provider."""
        if self.llm_provider == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
