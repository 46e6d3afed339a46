# src/cache/fingerprint.py — v3
"""Deterministic cache keys for profile requests.

The key covers everything that changes the assembled profile: subject,
scope, organization filter, language flag and language limit. Bump
KEY_VERSION when the Profile shape changes so persisted records from an
older layout are never read back.
"""

from __future__ import annotations

import hashlib

from ghcard.profile.models import ProfileOptions

KEY_VERSION = "v2"


def cache_key_material(login: str, options: ProfileOptions) -> str:
    """Readable pre-image of the cache key (useful in debug logs)."""
    langs = "langs" if options.include_languages else "nolangs"
    orgs = "|".join(options.organizations)
    return (
        f"{KEY_VERSION}:{login.strip().lower()}:{options.scope}:"
        f"{langs}:{options.language_limit}:{orgs}"
    )


def compute_cache_key(login: str, options: ProfileOptions) -> str:
    """SHA-256 of the key material, hex encoded."""
    raw = cache_key_material(login, options)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
