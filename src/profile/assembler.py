# src/profile/assembler.py — v2
"""Profile assembly: run the source fetchers a scope calls for and fold them.

    personal -> owned repositories (metadata rides on the first page)
    org      -> organization contributions + metadata-only query, concurrently
    all      -> owned repositories + organization contributions, concurrently

Any fetcher failure aborts the whole assembly and cancels its sibling; the
avatar embedding step is the only one allowed to degrade.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from ghcard.github import languages
from ghcard.github.fetchers import (
    RepoTotals,
    fetch_org_contributions,
    fetch_owned_repos,
    fetch_user_meta,
)
from ghcard.github.paginator import MAX_PAGES
from ghcard.profile.models import Profile, ProfileOptions, UserProfile, UserStats

if TYPE_CHECKING:
    from ghcard.github.client import GitHubClient
    from ghcard.github.models import UserNode

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_SIZE = 200


def commit_window(now: datetime) -> tuple[str, str]:
    """ISO range from January 1st (UTC) of the current year up to ``now``."""
    now = now.astimezone(timezone.utc)
    start = datetime(now.year, 1, 1, tzinfo=timezone.utc)
    return start.isoformat(), now.isoformat()


class ProfileAssembler:
    """Build a Profile from upstream data.

    Args:
        client: GraphQL client used by every fetcher.
        max_pages: Page ceiling per fetcher.
        avatar_size: Size hint appended to the avatar URL before embedding.
        clock: Returns epoch seconds; fixes the commit window in tests.
    """

    def __init__(
        self,
        client: GitHubClient,
        max_pages: int = MAX_PAGES,
        avatar_size: int = DEFAULT_AVATAR_SIZE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._max_pages = max_pages
        self._avatar_size = avatar_size
        self._clock = clock

    async def assemble(self, login: str, options: ProfileOptions) -> Profile:
        """Fetch and normalize one profile.

        Raises:
            ProfileFetchError: Classified failure from any fetcher.
        """
        since, until = commit_window(
            datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        )
        langs = options.include_languages
        owned: RepoTotals | None = None
        org: RepoTotals | None = None

        if options.scope == "personal":
            owned_repos = await fetch_owned_repos(
                self._client, login, include_languages=langs,
                since=since, until=until, max_pages=self._max_pages,
            )
            user, owned = owned_repos.user, owned_repos.totals
        elif options.scope == "org":
            user, org = await _gather_or_cancel(
                fetch_user_meta(self._client, login, since=since, until=until),
                fetch_org_contributions(
                    self._client, login, include_languages=langs,
                    organizations=options.organizations, max_pages=self._max_pages,
                ),
            )
        else:
            owned_repos, org = await _gather_or_cancel(
                fetch_owned_repos(
                    self._client, login, include_languages=langs,
                    since=since, until=until, max_pages=self._max_pages,
                ),
                fetch_org_contributions(
                    self._client, login, include_languages=langs,
                    organizations=options.organizations, max_pages=self._max_pages,
                ),
            )
            user, owned = owned_repos.user, owned_repos.totals

        ranked = (
            languages.rank(
                languages.merge(
                    owned.languages if owned else None,
                    org.languages if org else None,
                ),
                options.language_limit,
            )
            if langs else []
        )
        avatar = await self._client.fetch_avatar_data_url(
            user.avatar_url, size=self._avatar_size
        )

        profile = Profile(
            user=_user_profile(user, login, avatar),
            stats=UserStats(
                stars=_sum(owned, org, "stars"),
                repos=_sum(owned, org, "repos"),
                prs=user.pull_request_count,
                issues=user.issue_count,
                commits=user.commit_count,
            ),
            languages=tuple(ranked),
        )
        logger.info(
            "Assembled profile for %s (scope=%s): stars=%d repos=%d languages=%d",
            profile.user.login, options.scope, profile.stats.stars,
            profile.stats.repos, len(profile.languages),
        )
        return profile


async def _gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Run fetchers concurrently; the first failure cancels the others."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


def _sum(owned: RepoTotals | None, org: RepoTotals | None, field: str) -> int:
    return sum(getattr(t, field) for t in (owned, org) if t is not None)


def _user_profile(user: UserNode, login: str, avatar: str) -> UserProfile:
    return UserProfile(
        login=user.login or login,
        name=user.name,
        avatar_url=avatar,
        bio=user.bio,
        pronouns=user.pronouns,
        twitter=user.twitter_username,
    )
