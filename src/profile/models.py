# src/profile/models.py — v1
"""Public profile shape and the options that select which profile to build.

Profiles are frozen: a refresh produces a new value, cached copies are never
mutated in place.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Scope = Literal["personal", "org", "all"]

MIN_LANGUAGE_LIMIT = 1
MAX_LANGUAGE_LIMIT = 10
DEFAULT_LANGUAGE_LIMIT = 5


class UserProfile(BaseModel):
    """Subject identity. Only ``login`` is guaranteed."""

    model_config = ConfigDict(frozen=True)

    login: str
    name: str | None = None
    avatar_url: str = ""
    bio: str | None = None
    pronouns: str | None = None
    twitter: str | None = None


class UserStats(BaseModel):
    """Activity totals."""

    model_config = ConfigDict(frozen=True)

    stars: int = Field(0, ge=0)
    repos: int = Field(0, ge=0)
    prs: int = Field(0, ge=0)
    issues: int = Field(0, ge=0)
    commits: int = Field(0, ge=0)


class LanguageStat(BaseModel):
    """One ranked language: cumulative byte size across all sources."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: int
    color: str


class Profile(BaseModel):
    """Assembled profile as served by the cache."""

    model_config = ConfigDict(frozen=True)

    user: UserProfile
    stats: UserStats
    languages: tuple[LanguageStat, ...] = ()


def normalize_scope(value: str | None) -> Scope:
    """Map free-form input onto a scope; anything unknown means ``personal``."""
    normalized = (value or "").strip().lower()
    if normalized == "org" or normalized == "all":
        return normalized  # type: ignore[return-value]
    return "personal"


def normalize_organizations(values: object) -> tuple[str, ...]:
    """Trim, drop empties, lower-case, dedupe and sort organization logins.

    Accepts an iterable of logins or a single comma-separated string.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        values = values.split(",")
    cleaned = {str(v).strip().lower() for v in values}  # type: ignore[union-attr]
    return tuple(sorted(v for v in cleaned if v))


def clamp_language_limit(value: int | None) -> int:
    if value is None:
        return DEFAULT_LANGUAGE_LIMIT
    return min(MAX_LANGUAGE_LIMIT, max(MIN_LANGUAGE_LIMIT, int(value)))


class ProfileOptions(BaseModel):
    """Everything that shapes a profile request.

    All fields except ``force_refresh`` feed the cache fingerprint.
    """

    model_config = ConfigDict(frozen=True)

    include_languages: bool = True
    language_limit: int = DEFAULT_LANGUAGE_LIMIT
    scope: Scope = "personal"
    organizations: tuple[str, ...] = ()
    force_refresh: bool = False

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
