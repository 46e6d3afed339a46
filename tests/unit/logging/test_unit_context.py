# tests/unit/logging/test_context.py — v2
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from ghcard.logging.context import clear_context, get_context, set_request_context


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.subject is None
        assert ctx.cache_key is None

    def test_set_request_context(self):
        set_request_context("octocat", "key1")
        ctx = get_context()
        assert ctx.subject == "octocat"
        assert ctx.cache_key == "key1"

    def test_as_dict_filters_none(self):
        set_request_context("octocat")
        d = get_context().as_dict()
        assert d == {"subject": "octocat"}

    def test_clear(self):
        set_request_context("octocat", "key1")
        clear_context()
        ctx = get_context()
        assert ctx.subject is None
        assert ctx.cache_key is None

    @pytest.mark.asyncio
    async def test_task_inherits_context(self):
        set_request_context("octocat", "key1")

        async def read():
            return get_context().subject

        task = asyncio.create_task(read())
        set_request_context("someone-else")
        assert await task == "octocat"
