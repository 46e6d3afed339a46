# src/cache/manager.py — v1
"""Two-tier profile cache with single-flight fetches and stale-while-revalidate.

Per fingerprint, driven only by clock comparison at lookup time:

    absent -> (assembler succeeds)      -> fresh
    fresh  -> (now >= stale_at)         -> stale
    stale  -> (now >= expires_at)       -> expired, purged on next lookup
    stale  -> (revalidation succeeds)   -> fresh (entry replaced)
    any    -> (assembler fails)         -> absent (entry deleted)

All coordination relies on the event loop: an in-flight task is registered
before the first await, so no second fetch for the same key can start in
between.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

from ghcard.cache.fingerprint import compute_cache_key
from ghcard.cache.models import CacheEntry, CacheMetrics
from ghcard.logging.context import set_request_context
from ghcard.profile.models import Profile, ProfileOptions

if TYPE_CHECKING:
    from ghcard.cache.base_cache_store import BaseProfileStore
    from ghcard.config.settings import Settings
    from ghcard.profile.assembler import ProfileAssembler

logger = logging.getLogger(__name__)

DEFAULT_FRESH_TTL_S = 30 * 60
DEFAULT_STALE_TTL_S = 30 * 60
DEFAULT_REVALIDATE_COOLDOWN_S = 60


class ProfileCache:
    """Process-local profile cache in front of a ProfileAssembler.

    Construct once per process and share by reference.

    Args:
        assembler: Builds profiles on a miss or refresh.
        store: Optional persistent tier, consulted after memory.
        fresh_ttl_s: Seconds a value is served without revalidation.
        stale_ttl_s: Further seconds a value is served while revalidating.
        revalidate_cooldown_s: Minimum gap between background attempts on
            an entry whose last revalidation failed. 0 disables the gap.
        clock: Returns epoch seconds.
    """

    def __init__(
        self,
        assembler: ProfileAssembler,
        store: BaseProfileStore | None = None,
        fresh_ttl_s: int = DEFAULT_FRESH_TTL_S,
        stale_ttl_s: int = DEFAULT_STALE_TTL_S,
        revalidate_cooldown_s: int = DEFAULT_REVALIDATE_COOLDOWN_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._assembler = assembler
        self._store = store
        self._fresh_ttl_s = fresh_ttl_s
        self._stale_ttl_s = stale_ttl_s
        self._revalidate_cooldown_s = revalidate_cooldown_s
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._background: set[asyncio.Task[Profile | None]] = set()

    @classmethod
    def from_settings(
        cls,
        assembler: ProfileAssembler,
        settings: Settings,
        store: BaseProfileStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> ProfileCache:
        return cls(
            assembler,
            store=store,
            fresh_ttl_s=settings.cache_fresh_seconds,
            stale_ttl_s=settings.cache_stale_seconds,
            revalidate_cooldown_s=settings.cache_revalidate_cooldown_seconds,
            clock=clock,
        )

    @property
    def store(self) -> BaseProfileStore | None:
        return self._store

    # --- Public API ---

    async def get_profile(self, login: str, options: ProfileOptions) -> Profile:
        """Return the profile for ``login``, from cache whenever allowed.

        Raises:
            ProfileFetchError: The upstream fetch this call waited on failed.
        """
        key = compute_cache_key(login, options)
        set_request_context(login, key)

        if not options.force_refresh:
            entry = self._usable_entry(key)
            if entry is not None and entry.value is not None:
                if self._clock() < entry.stale_at:
                    logger.debug("Cache hit (fresh) for %s", login)
                    return entry.value
                logger.debug("Cache hit (stale) for %s", login)
                self._schedule_revalidation(key, login, options, entry)
                return entry.value

            pending = self._pending_fetch(key)
            if pending is not None:
                logger.debug("Joining in-flight fetch for %s", login)
                return await asyncio.shield(pending)

            persisted = await self._read_store(key)
            if persisted is not None:
                current = self._usable_entry(key)
                if current is not None and current.value is not None:
                    return current.value
                logger.debug("Persistent store hit for %s", login)
                self._set_fresh(key, persisted)
                return persisted

            pending = self._pending_fetch(key)
            if pending is not None:
                logger.debug("Joining in-flight fetch for %s", login)
                return await asyncio.shield(pending)

        logger.debug(
            "Cache %s for %s", "refresh" if options.force_refresh else "miss", login
        )
        task = self._start_fetch(key, login, options)
        # A cancelled caller must not cancel the fetch other callers share.
        return await asyncio.shield(task)

    def metrics(self) -> CacheMetrics:
        """Point-in-time entry counts by state. Purges nothing."""
        now = self._clock()
        counts = {"fresh": 0, "stale": 0, "expired": 0, "pending": 0}
        for entry in self._entries.values():
            counts[entry.state(now)] += 1
        return CacheMetrics(
            total=len(self._entries),
            fresh_ttl_seconds=self._fresh_ttl_s,
            stale_ttl_seconds=self._stale_ttl_s,
            **counts,
        )

    async def is_store_reachable(self) -> bool:
        """Best-effort probe of the persistent tier. Never raises."""
        if self._store is None:
            return False
        try:
            return bool(await self._store.ping())
        except Exception as exc:
            logger.debug("Persistent store ping failed: %s", exc)
            return False

    async def aclose(self) -> None:
        """Cancel background revalidations and close the persistent store."""
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        if self._store is not None:
            try:
                await self._store.close()
            except Exception:
                logger.exception("Closing persistent store failed (non-fatal)")

    # --- Entry bookkeeping ---

    def _usable_entry(self, key: str) -> CacheEntry | None:
        """Entry carrying a servable value; expired entries are purged here."""
        entry = self._entries.get(key)
        if entry is None or entry.value is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    def _pending_fetch(self, key: str) -> asyncio.Task[Profile] | None:
        entry = self._entries.get(key)
        if entry is None or entry.value is not None or entry.in_flight is None:
            return None
        if entry.in_flight.done() and entry.in_flight.cancelled():
            return None
        return entry.in_flight  # type: ignore[return-value]

    def _new_entry(self, value: Profile | None = None) -> CacheEntry:
        now = self._clock()
        return CacheEntry(
            stale_at=now + self._fresh_ttl_s,
            expires_at=now + self._fresh_ttl_s + self._stale_ttl_s,
            value=value,
        )

    def _set_fresh(self, key: str, profile: Profile) -> None:
        """Replace the entry wholesale with a fresh value and no in-flight handle."""
        self._entries[key] = self._new_entry(profile)

    def _discard(self, key: str, task: asyncio.Task | None) -> None:
        entry = self._entries.get(key)
        if entry is not None and entry.in_flight is task:
            del self._entries[key]

    # --- Foreground fetch ---

    def _start_fetch(
        self, key: str, login: str, options: ProfileOptions
    ) -> asyncio.Task[Profile]:
        """Create the fetch task and register it before anything awaits."""
        task = asyncio.create_task(
            self._fetch(key, login, options), name=f"ghcard-fetch:{key[:12]}"
        )
        entry = self._new_entry()
        entry.in_flight = task
        self._entries[key] = entry
        task.add_done_callback(_mark_exception_retrieved)
        return task

    async def _fetch(self, key: str, login: str, options: ProfileOptions) -> Profile:
        task = asyncio.current_task()
        try:
            profile = await self._assembler.assemble(login, options)
        except asyncio.CancelledError:
            self._discard(key, task)
            raise
        except Exception as exc:
            logger.warning("Profile fetch failed for %s: %s", login, exc)
            self._discard(key, task)
            raise

        self._set_fresh(key, profile)
        await self._write_store(key, profile)
        return profile

    # --- Background revalidation ---

    def _schedule_revalidation(
        self, key: str, login: str, options: ProfileOptions, entry: CacheEntry
    ) -> None:
        if entry.in_flight is not None and not entry.in_flight.done():
            return
        if (
            entry.revalidation_failed_at is not None
            and self._clock() - entry.revalidation_failed_at < self._revalidate_cooldown_s
        ):
            return

        task = asyncio.create_task(
            self._revalidate(key, login, options, entry),
            name=f"ghcard-revalidate:{key[:12]}",
        )
        entry.in_flight = task
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _revalidate(
        self, key: str, login: str, options: ProfileOptions, entry: CacheEntry
    ) -> Profile | None:
        """Refresh a stale entry; only ever touches the entry it was spawned for."""
        task = asyncio.current_task()
        try:
            profile = await self._assembler.assemble(login, options)
        except Exception as exc:
            logger.warning(
                "Background revalidation failed for %s, serving stale value: %s",
                login, exc,
            )
            if self._entries.get(key) is entry and entry.in_flight is task:
                entry.in_flight = None
                entry.revalidation_failed_at = self._clock()
            return None

        if self._entries.get(key) is not entry or entry.in_flight is not task:
            logger.debug("Revalidation for %s superseded, result dropped", login)
            return None

        self._set_fresh(key, profile)
        await self._write_store(key, profile)
        logger.info("Revalidated cached profile for %s", login)
        return profile

    # --- Persistent tier ---

    async def _read_store(self, key: str) -> Profile | None:
        if self._store is None:
            return None
        try:
            return await self._store.get(key)
        except Exception as exc:
            logger.warning("Persistent store read failed: %s", exc)
            return None

    async def _write_store(self, key: str, profile: Profile) -> None:
        if self._store is None:
            return
        try:
            await self._store.put(key, profile, self._fresh_ttl_s + self._stale_ttl_s)
        except Exception as exc:
            logger.warning("Persistent store write failed: %s", exc)


def _mark_exception_retrieved(task: asyncio.Task) -> None:
    # Failures reach every awaiting caller; retrieving here keeps asyncio
    # from reporting them again when the last caller was cancelled.
    if not task.cancelled():
        task.exception()
