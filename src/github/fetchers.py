# src/github/fetchers.py — v2
"""Source fetchers: owned repositories, organization contributions, user metadata.

Each fetcher keeps its accumulators local and returns them only once the
page loop has finished, so an aborted loop never leaks a partial total.
The fetchers share no state and are safe to run concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ghcard.github import languages
from ghcard.github.errors import UpstreamError
from ghcard.github.languages import LanguageMap
from ghcard.github.models import RepositoryConnection, UserNode
from ghcard.github.paginator import MAX_PAGES, PageCursor, paginate
from ghcard.github.queries import (
    USER_META_QUERY,
    build_org_contributions_query,
    build_owned_repos_query,
)

if TYPE_CHECKING:
    from collections.abc import Collection

    from ghcard.github.client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass
class RepoTotals:
    """Totals contributed by one source."""

    stars: int = 0
    repos: int = 0
    languages: LanguageMap | None = None


@dataclass
class OwnedRepos:
    """Owned-repository totals plus the metadata that rode on the first page."""

    user: UserNode
    totals: RepoTotals


def _cursor_of(connection: RepositoryConnection | None) -> PageCursor:
    if connection is None:
        return PageCursor(item_count=0, has_next_page=False, end_cursor=None)
    info = connection.page_info
    return PageCursor(
        item_count=len(connection.nodes),
        has_next_page=info.has_next_page if info is not None else False,
        end_cursor=info.end_cursor if info is not None else None,
    )


async def fetch_owned_repos(
    client: GitHubClient,
    login: str,
    *,
    include_languages: bool,
    since: str,
    until: str,
    max_pages: int = MAX_PAGES,
) -> OwnedRepos:
    """Page through the subject's own non-fork repositories, most starred first.

    The repository count is the first page's ``totalCount``: the upstream
    figure is taken as authoritative rather than re-counted.
    """
    query = build_owned_repos_query(include_languages)
    totals = RepoTotals(languages={} if include_languages else None)
    user: UserNode | None = None
    count_taken = False

    async def fetch_page(cursor: str | None) -> UserNode:
        return await client.query_user(
            query, {"login": login, "cursor": cursor, "from": since, "to": until}
        )

    def consume(page: UserNode) -> PageCursor:
        nonlocal user, count_taken
        if user is None:
            user = page
        connection = page.repositories
        if not count_taken and connection is not None:
            totals.repos = connection.total_count
            count_taken = True
        for node in connection.nodes if connection is not None else ():
            if node is None:
                continue
            totals.stars += node.star_count
            if totals.languages is not None:
                languages.accumulate(node.language_edges, totals.languages)
        return _cursor_of(connection)

    pages = await paginate(fetch_page, consume, max_pages=max_pages)
    if user is None:
        raise UpstreamError(f"No repository page returned for {login}")
    logger.debug(
        "Owned repos for %s: %d pages, stars=%d, repos=%d",
        login, pages, totals.stars, totals.repos,
    )
    return OwnedRepos(user=user, totals=totals)


async def fetch_org_contributions(
    client: GitHubClient,
    login: str,
    *,
    include_languages: bool,
    organizations: Collection[str] = (),
    max_pages: int = MAX_PAGES,
) -> RepoTotals:
    """Page through organization-owned repositories the subject contributed to.

    Args:
        organizations: Lower-cased organization logins to keep. Empty keeps
            every organization.
    """
    query = build_org_contributions_query(include_languages)
    wanted = frozenset(organizations)
    totals = RepoTotals(languages={} if include_languages else None)

    async def fetch_page(cursor: str | None) -> UserNode:
        return await client.query_user(query, {"login": login, "cursor": cursor})

    def consume(page: UserNode) -> PageCursor:
        connection = page.repositories_contributed_to
        for node in connection.nodes if connection is not None else ():
            if node is None or node.owner is None or not node.owner.is_organization:
                continue
            if wanted and node.owner.login.lower() not in wanted:
                continue
            totals.stars += node.star_count
            totals.repos += 1
            if totals.languages is not None:
                languages.accumulate(node.language_edges, totals.languages)
        return _cursor_of(connection)

    pages = await paginate(fetch_page, consume, max_pages=max_pages)
    logger.debug(
        "Org contributions for %s: %d pages, stars=%d, repos=%d",
        login, pages, totals.stars, totals.repos,
    )
    return totals


async def fetch_user_meta(
    client: GitHubClient, login: str, *, since: str, until: str
) -> UserNode:
    """Metadata-only lookup, for scopes that skip the owned-repository query."""
    return await client.query_user(
        USER_META_QUERY, {"login": login, "from": since, "to": until}
    )
