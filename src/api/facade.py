# src/api/facade.py — v2
"""Public API facade: the profile service consumed by rendering and routing.

Usage:
    from ghcard.api.facade import create_profile_service

    async with create_profile_service() as service:
        profile = await service.get_profile("octocat", scope="all")

Build the service once per process and pass it to request handlers; the
cache it owns is only useful when shared.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Callable

from ghcard.api.models import HealthReport, ProfileRequest
from ghcard.cache.cache_factory import create_profile_store
from ghcard.cache.manager import ProfileCache
from ghcard.config.settings import Settings
from ghcard.github.client import GitHubClient
from ghcard.profile.assembler import ProfileAssembler
from ghcard.profile.models import DEFAULT_LANGUAGE_LIMIT, Profile
from ghcard.version import __version__

if TYPE_CHECKING:
    import httpx

    from ghcard.cache.base_cache_store import BaseProfileStore
    from ghcard.cache.models import CacheMetrics

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile lookups, cache telemetry and health, behind one object.

    Args:
        cache: Shared profile cache.
        client: GitHub client, closed with the service.
        backend: Persistent backend name, reported by ``health()``.
        clock: Returns epoch seconds, used for uptime.
    """

    def __init__(
        self,
        cache: ProfileCache,
        client: GitHubClient,
        backend: str = "none",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache = cache
        self._client = client
        self._backend = backend
        self._clock = clock
        self._started_at = clock()

    async def get_profile(
        self,
        login: str,
        *,
        include_languages: bool = True,
        language_limit: int = DEFAULT_LANGUAGE_LIMIT,
        scope: str = "personal",
        organizations: Iterable[str] | str = (),
        force_refresh: bool = False,
    ) -> Profile:
        """Return the profile for ``login``.

        Raises:
            pydantic.ValidationError: ``login`` is not a valid GitHub login.
            NotFoundError: No such user upstream.
            RateLimitedError: Upstream throttled the request.
            AuthFailureError: Token missing or rejected.
            UpstreamError: Anything else, timeouts included.
        """
        request = ProfileRequest(
            login=login,
            include_languages=include_languages,
            language_limit=language_limit,
            scope=scope,
            organizations=organizations,
            force_refresh=force_refresh,
        )
        return await self._cache.get_profile(request.login, request.to_options())

    def get_cache_metrics(self) -> CacheMetrics:
        return self._cache.metrics()

    async def is_persistent_store_reachable(self) -> bool:
        return await self._cache.is_store_reachable()

    async def health(self) -> HealthReport:
        """Service health and cache telemetry."""
        return HealthReport(
            version=__version__,
            uptime_seconds=int(self._clock() - self._started_at),
            cache=self._cache.metrics(),
            persistent_store_backend=self._backend,
            persistent_store_reachable=await self._cache.is_store_reachable(),
        )

    async def aclose(self) -> None:
        await self._cache.aclose()
        await self._client.aclose()

    async def __aenter__(self) -> ProfileService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_profile_service(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
    store: BaseProfileStore | None = None,
    clock: Callable[[], float] = time.time,
) -> ProfileService:
    """Wire client, assembler, store and cache from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        http_client: Shared httpx client (tests inject a MockTransport here).
        store: Persistent store override. Built from settings when None.
        clock: Epoch-seconds clock shared by the cache and the assembler.
    """
    settings = settings or Settings()
    if store is None:
        store = create_profile_store(settings)

    client = GitHubClient.from_settings(settings, http_client=http_client)
    assembler = ProfileAssembler(
        client,
        max_pages=settings.max_pages,
        avatar_size=settings.avatar_size,
        clock=clock,
    )
    cache = ProfileCache.from_settings(assembler, settings, store=store, clock=clock)

    backend = type(store).__name__ if store is not None else "none"
    logger.info(
        "Profile service ready: store=%s fresh=%ds stale=%ds max_pages=%d",
        backend,
        settings.cache_fresh_seconds,
        settings.cache_stale_seconds,
        settings.max_pages,
    )
    return ProfileService(
        cache,
        client,
        backend=backend,
        clock=clock,
    )
