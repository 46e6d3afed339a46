# tests/unit/github/test_unit_errors.py — v1
"""Tests for github/errors.py — failure taxonomy and classification."""

from __future__ import annotations

import pytest

from ghcard.github.errors import (
    AuthFailureError,
    ErrorKind,
    NotFoundError,
    ProfileFetchError,
    RateLimitedError,
    UpstreamError,
    UpstreamTimeoutError,
    classify_graphql_message,
    classify_http_error,
    error_for,
)


class TestClassifyGraphqlMessage:
    @pytest.mark.parametrize("message", [
        "Could not resolve to a User with the login of 'nobody'.",
        "Not Found",
        "Couldn't find user",
    ])
    def test_not_found(self, message):
        assert classify_graphql_message(message) is ErrorKind.NOT_FOUND

    def test_rate_limited(self):
        assert classify_graphql_message("API rate limit exceeded for user") is ErrorKind.RATE_LIMITED

    @pytest.mark.parametrize("message", [
        "Bad credentials",
        "This endpoint requires authentication",
        "Resource not accessible by integration",
    ])
    def test_auth(self, message):
        assert classify_graphql_message(message) is ErrorKind.AUTH_FAILURE

    def test_not_found_takes_priority(self):
        msg = "Could not resolve to a User | API rate limit exceeded"
        assert classify_graphql_message(msg) is ErrorKind.NOT_FOUND

    def test_rate_limit_before_auth(self):
        msg = "rate limit hit | bad credentials"
        assert classify_graphql_message(msg) is ErrorKind.RATE_LIMITED

    @pytest.mark.parametrize("message", ["Something went wrong", "", None])
    def test_fallback(self, message):
        assert classify_graphql_message(message) is ErrorKind.UPSTREAM_ERROR


class TestClassifyHttpError:
    def test_401(self):
        assert classify_http_error(401) is ErrorKind.AUTH_FAILURE

    def test_bad_credentials_body(self):
        assert classify_http_error(403, '{"message":"Bad credentials"}') is ErrorKind.AUTH_FAILURE

    def test_403_rate_limit(self):
        body = '{"message":"API rate limit exceeded"}'
        assert classify_http_error(403, body) is ErrorKind.RATE_LIMITED

    def test_403_abuse_detection(self):
        body = "You have triggered an abuse detection mechanism"
        assert classify_http_error(403, body) is ErrorKind.RATE_LIMITED

    def test_403_plain(self):
        assert classify_http_error(403, "Forbidden") is ErrorKind.UPSTREAM_ERROR

    def test_404(self):
        assert classify_http_error(404) is ErrorKind.NOT_FOUND

    def test_429_is_upstream(self):
        assert classify_http_error(429) is ErrorKind.UPSTREAM_ERROR

    def test_500(self):
        assert classify_http_error(500, "oops") is ErrorKind.UPSTREAM_ERROR


class TestErrorTypes:
    def test_error_for_maps_kinds(self):
        assert isinstance(error_for(ErrorKind.NOT_FOUND), NotFoundError)
        assert isinstance(error_for(ErrorKind.RATE_LIMITED), RateLimitedError)
        assert isinstance(error_for(ErrorKind.AUTH_FAILURE), AuthFailureError)
        assert isinstance(error_for(ErrorKind.UPSTREAM_ERROR), UpstreamError)

    def test_default_messages(self):
        assert str(NotFoundError()) == "User not found"
        assert str(RateLimitedError()) == "GitHub API rate limit exceeded"
        assert str(UpstreamTimeoutError()) == "GitHub API request timed out"

    def test_custom_message(self):
        err = error_for(ErrorKind.UPSTREAM_ERROR, "GitHub API error (500)")
        assert str(err) == "GitHub API error (500)"

    def test_http_status(self):
        assert NotFoundError.http_status == 404
        assert RateLimitedError.http_status == 429
        assert AuthFailureError.http_status == 401
        assert UpstreamError.http_status == 502

    def test_timeout_is_upstream(self):
        err = UpstreamTimeoutError()
        assert isinstance(err, UpstreamError)
        assert isinstance(err, ProfileFetchError)
        assert err.kind is ErrorKind.UPSTREAM_ERROR

    def test_kind_is_string(self):
        assert ErrorKind.RATE_LIMITED.value == "rate_limited"
        assert ErrorKind.RATE_LIMITED == "rate_limited"
