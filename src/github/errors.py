# src/github/errors.py — v1
"""Upstream failure taxonomy and classification.

Classification happens once, at the transport boundary (github/client.py).
Everything above it only looks at ``ProfileFetchError.kind``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced to callers."""

    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    AUTH_FAILURE = "auth_failure"
    UPSTREAM_ERROR = "upstream_error"


class ProfileFetchError(Exception):
    """Base class for classified upstream failures."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    http_status: int = 502
    default_message: str = "GitHub API request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotFoundError(ProfileFetchError):
    kind = ErrorKind.NOT_FOUND
    http_status = 404
    default_message = "User not found"


class RateLimitedError(ProfileFetchError):
    kind = ErrorKind.RATE_LIMITED
    http_status = 429
    default_message = "GitHub API rate limit exceeded"


class AuthFailureError(ProfileFetchError):
    kind = ErrorKind.AUTH_FAILURE
    http_status = 401
    default_message = "GitHub authentication failed"


class UpstreamError(ProfileFetchError):
    kind = ErrorKind.UPSTREAM_ERROR
    http_status = 502
    default_message = "GitHub API request failed"


class UpstreamTimeoutError(UpstreamError):
    """The upstream did not answer within the request timeout."""

    default_message = "GitHub API request timed out"


_ERROR_TYPES: dict[ErrorKind, type[ProfileFetchError]] = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.RATE_LIMITED: RateLimitedError,
    ErrorKind.AUTH_FAILURE: AuthFailureError,
    ErrorKind.UPSTREAM_ERROR: UpstreamError,
}

_NOT_FOUND_PHRASES = ("could not resolve to a user", "not found", "couldn't find user")
_RATE_LIMIT_PHRASES = ("rate limit",)
_AUTH_PHRASES = ("bad credentials", "requires authentication", "resource not accessible")


def classify_graphql_message(message: str | None) -> ErrorKind:
    """Classify the message text of a GraphQL ``errors`` list.

    Checked in priority order: not found, rate limit, auth.
    """
    lower = (message or "").lower()
    if any(p in lower for p in _NOT_FOUND_PHRASES):
        return ErrorKind.NOT_FOUND
    if any(p in lower for p in _RATE_LIMIT_PHRASES):
        return ErrorKind.RATE_LIMITED
    if any(p in lower for p in _AUTH_PHRASES):
        return ErrorKind.AUTH_FAILURE
    return ErrorKind.UPSTREAM_ERROR


def classify_http_error(status: int, body: str | None = None) -> ErrorKind:
    """Classify a non-2xx transport response."""
    lower = (body or "").lower()
    if status == 401 or "bad credentials" in lower:
        return ErrorKind.AUTH_FAILURE
    if status == 403 and ("rate limit" in lower or "abuse detection" in lower):
        return ErrorKind.RATE_LIMITED
    if status == 404:
        return ErrorKind.NOT_FOUND
    return ErrorKind.UPSTREAM_ERROR


def error_for(kind: ErrorKind, message: str | None = None) -> ProfileFetchError:
    """Build the exception matching a classified kind."""
    return _ERROR_TYPES[kind](message)
