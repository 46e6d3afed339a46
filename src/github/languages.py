# src/github/languages.py — v1
"""Size-weighted language maps: accumulate per page, merge per source, rank once."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ghcard.github.models import LanguageEdge
from ghcard.profile.models import LanguageStat

DEFAULT_COLOR = "#ccc"


@dataclass
class LanguageTotal:
    size: int
    color: str


# Insertion-ordered: rank() relies on it for stable ties.
LanguageMap = dict[str, LanguageTotal]


def accumulate(
    edges: Iterable[LanguageEdge | None] | None, lang_map: LanguageMap
) -> LanguageMap:
    """Fold one repository's language edges into a running map.

    The first color seen for a language wins; edges without a name or size
    are skipped.
    """
    for edge in edges or ():
        if edge is None or edge.node is None or not edge.node.name or not edge.size:
            continue
        current = lang_map.get(edge.node.name)
        if current is not None:
            current.size += edge.size
        else:
            lang_map[edge.node.name] = LanguageTotal(
                size=edge.size, color=edge.node.color or DEFAULT_COLOR
            )
    return lang_map


def merge(*maps: LanguageMap | None) -> LanguageMap:
    """Union any number of maps into a new one, summing shared sizes."""
    merged: LanguageMap = {}
    for lang_map in maps:
        if not lang_map:
            continue
        for name, total in lang_map.items():
            current = merged.get(name)
            if current is not None:
                current.size += total.size
            else:
                merged[name] = LanguageTotal(size=total.size, color=total.color)
    return merged


def rank(lang_map: LanguageMap | None, limit: int) -> list[LanguageStat]:
    """Largest languages first, ties in first-insertion order, at most ``limit``."""
    if not lang_map or limit <= 0:
        return []
    # sorted() is stable, reverse=True included
    ordered = sorted(lang_map.items(), key=lambda item: item[1].size, reverse=True)
    return [
        LanguageStat(name=name, size=total.size, color=total.color)
        for name, total in ordered[:limit]
    ]
