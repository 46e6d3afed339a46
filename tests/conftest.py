# tests/conftest.py — v3
"""Shared test fixtures for all unit tests.

Provides a scripted in-process GitHub (httpx.MockTransport), settings,
sample profiles and temp directories. No network access.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

from ghcard.config.settings import Settings
from ghcard.logging.context import clear_context
from ghcard.profile.models import LanguageStat, Profile, UserProfile, UserStats

AVATAR_URL = "https://avatars.githubusercontent.com/u/583231?v=4"
AVATAR_BYTES = b"\x89PNG\r\n\x1a\nfake"


def owned_node(stars: int, langs: dict[str, int] | None = None) -> dict[str, Any]:
    """One owned repository node."""
    node: dict[str, Any] = {"stargazers": {"totalCount": stars}}
    if langs is not None:
        node["languages"] = {
            "edges": [
                {"size": size, "node": {"name": name, "color": f"#{name[:3].lower()}"}}
                for name, size in langs.items()
            ]
        }
    return node


def org_node(
    owner: str,
    stars: int,
    langs: dict[str, int] | None = None,
    typename: str = "Organization",
) -> dict[str, Any]:
    """One contributed-to repository node."""
    node = owned_node(stars, langs)
    node["owner"] = {"login": owner, "__typename": typename}
    return node


def _query_kind(query: str) -> str:
    if "repositoriesContributedTo" in query:
        return "org"
    if "repositories(" in query:
        return "owned"
    return "meta"


class FakeGitHub:
    """Scripted GitHub GraphQL endpoint plus avatar host.

    Pages are chained with cursors ``c1``, ``c2``, ... and the page index is
    recovered from the cursor, so concurrent fetchers see consistent data.
    """

    owned_node = staticmethod(owned_node)
    org_node = staticmethod(org_node)

    def __init__(self) -> None:
        self.user: dict[str, Any] = {
            "login": "octocat",
            "name": "The Octocat",
            "avatarUrl": AVATAR_URL,
            "bio": "GitHub mascot",
            "pronouns": "it/its",
            "twitterUsername": "github",
            "openPRs": {"totalCount": 1},
            "closedPRs": {"totalCount": 2},
            "mergedPRs": {"totalCount": 3},
            "openIssues": {"totalCount": 4},
            "closedIssues": {"totalCount": 5},
            "contributionsCollection": {"totalCommitContributions": 42},
        }
        self.owned_pages: list[list[dict[str, Any]]] = [[]]
        self.owned_total: int | None = None
        self.org_pages: list[list[dict[str, Any]]] = [[]]
        self.user_missing = False
        self.graphql_errors: list[dict[str, Any]] | None = None
        self.http_status: int | None = None
        self.http_body = ""
        # Per-query HTTP failures keyed by "meta", "owned" or "org".
        self.query_status: dict[str, int] = {}
        self.avatar_status = 200
        self.requests: list[httpx.Request] = []

    # --- Transport ---

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            if self.avatar_status != 200:
                return httpx.Response(self.avatar_status)
            return httpx.Response(
                200, content=AVATAR_BYTES, headers={"content-type": "image/png"}
            )

        if self.http_status is not None:
            return httpx.Response(self.http_status, text=self.http_body)
        if self.graphql_errors is not None:
            return httpx.Response(200, json={"data": None, "errors": self.graphql_errors})
        if self.user_missing:
            return httpx.Response(200, json={"data": {"user": None}})

        body = json.loads(request.content)
        query, variables = body["query"], body["variables"]
        kind = _query_kind(query)
        if kind in self.query_status:
            return httpx.Response(self.query_status[kind], text="scripted failure")
        if kind == "org":
            user = {"repositoriesContributedTo": self._page(self.org_pages, variables)}
        elif kind == "owned":
            connection = self._page(self.owned_pages, variables)
            if self.owned_total is not None:
                connection["totalCount"] = self.owned_total
            user = {**self.user, "repositories": connection}
        else:
            user = dict(self.user)
        return httpx.Response(200, json={"data": {"user": user}})

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    # --- Inspection ---

    @property
    def graphql_requests(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    def queries_of(self, kind: str) -> list[dict[str, Any]]:
        return [b for b in self.graphql_requests if _query_kind(b["query"]) == kind]

    @property
    def avatar_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @staticmethod
    def _page(pages: list[list[dict[str, Any]]], variables: dict[str, Any]) -> dict[str, Any]:
        cursor = variables.get("cursor")
        index = int(cursor[1:]) if cursor else 0
        nodes = pages[index] if index < len(pages) else []
        has_next = index + 1 < len(pages)
        return {
            "totalCount": sum(len(p) for p in pages),
            "pageInfo": {
                "hasNextPage": has_next,
                "endCursor": f"c{index + 1}" if has_next else None,
            },
            "nodes": nodes,
        }


# === FIXTURES: Upstream ===


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest_asyncio.fixture
async def http_client(fake_github: FakeGitHub):
    client = fake_github.http_client()
    yield client
    await client.aclose()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any local .env."""
    return Settings(
        _env_file=None,
        github_token="ghp_test",
        cache_root=tmp_path / "cache",
    )


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_profile() -> Profile:
    """Minimal valid Profile."""
    return Profile(
        user=UserProfile(login="octocat", name="The Octocat", avatar_url=AVATAR_URL),
        stats=UserStats(stars=8, repos=2, prs=6, issues=9, commits=42),
        languages=(
            LanguageStat(name="TypeScript", size=120, color="#3178c6"),
            LanguageStat(name="HTML", size=50, color="#e34c26"),
        ),
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    clear_context()
    yield
    clear_context()
    root = logging.getLogger("ghcard")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache
