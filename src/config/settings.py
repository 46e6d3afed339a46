# src/config/settings.py — v3
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for upstream access, cache TTLs, persistent store
selection and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_PAGE_CEILING = 10


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Upstream (GitHub GraphQL) ===
    github_token: str = ""
    github_graphql_url: str = "https://api.github.com/graphql"
    github_user_agent: str = "ghcard"
    request_timeout_seconds: float = 8.0
    avatar_timeout_seconds: float = 3.0
    avatar_size: int = 200
    max_pages: int = MAX_PAGE_CEILING

    # === Cache ===
    cache_fresh_seconds: int = 30 * 60
    cache_stale_seconds: int = 30 * 60
    cache_revalidate_cooldown_seconds: int = 60
    cache_backend: Literal["none", "json", "sqlite", "redis"] = "none"
    cache_root: Path = Path("~/.ghcard/cache")
    cache_redis_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("max_pages")
    @classmethod
    def validate_max_pages(cls, v: int) -> int:  # noqa: N805
        if not 1 <= v <= MAX_PAGE_CEILING:
            raise ValueError(f"max_pages must be between 1 and {MAX_PAGE_CEILING}")
        return v

    @field_validator("request_timeout_seconds", "avatar_timeout_seconds")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_fresh_seconds <= 0 or self.cache_stale_seconds <= 0:
            errors.append("CACHE_FRESH_SECONDS and CACHE_STALE_SECONDS must be > 0")

        if self.cache_revalidate_cooldown_seconds < 0:
            errors.append("CACHE_REVALIDATE_COOLDOWN_SECONDS must be >= 0")

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
