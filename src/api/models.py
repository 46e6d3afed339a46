# src/api/models.py — v2
"""API-level models: ProfileRequest, HealthReport."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ghcard.cache.models import CacheMetrics
from ghcard.profile.models import (
    DEFAULT_LANGUAGE_LIMIT,
    ProfileOptions,
    Scope,
    clamp_language_limit,
    normalize_organizations,
    normalize_scope,
)

LOGIN_PATTERN = r"^[A-Za-z0-9-]{1,39}$"


class ProfileRequest(BaseModel):
    """Validated caller input for one profile lookup."""

    login: str = Field(pattern=LOGIN_PATTERN)
    include_languages: bool = True
    language_limit: int = DEFAULT_LANGUAGE_LIMIT
    scope: Scope = "personal"
    organizations: tuple[str, ...] = ()
    force_refresh: bool = False

    @field_validator("login", mode="before")
    @classmethod
    def _strip_login(cls, v: str) -> str:  # noqa: N805
        return v.strip() if isinstance(v, str) else v

    @field_validator("language_limit", mode="before")
    @classmethod
    def _clamp_limit(cls, v: int | None) -> int:  # noqa: N805
        return clamp_language_limit(v)

    @field_validator("scope", mode="before")
    @classmethod
    def _normalize_scope(cls, v: str | None) -> str:  # noqa: N805
        return normalize_scope(v)

    @field_validator("organizations", mode="before")
    @classmethod
    def _normalize_organizations(cls, v: object) -> tuple[str, ...]:  # noqa: N805
        return normalize_organizations(v)

    def to_options(self) -> ProfileOptions:
        return ProfileOptions(
            include_languages=self.include_languages,
            language_limit=self.language_limit,
            scope=self.scope,
            organizations=self.organizations,
            force_refresh=self.force_refresh,
        )


class HealthReport(BaseModel):
    """Service health and cache telemetry."""

    status: str = "ok"
    version: str
    uptime_seconds: int
    cache: CacheMetrics
    persistent_store_backend: str
    persistent_store_reachable: bool
