# src/github/paginator.py — v1
"""Cursor-driven page loop shared by the source fetchers.

The paginator knows nothing about what is being accumulated: the caller's
``consume`` fold updates its own accumulators and reports where the page
stands. Errors propagate immediately; accumulators live in the caller's
frame, so a failed loop never yields a partial total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

MAX_PAGES = 10  # 10 pages x 100 items

PageT = TypeVar("PageT")


@dataclass(frozen=True)
class PageCursor:
    """What one page reported about the rest of the collection."""

    item_count: int
    has_next_page: bool
    end_cursor: str | None


async def paginate(
    fetch_page: Callable[[str | None], Awaitable[PageT]],
    consume: Callable[[PageT], PageCursor],
    max_pages: int = MAX_PAGES,
) -> int:
    """Fetch pages until exhausted, empty, cursorless or at the ceiling.

    Args:
        fetch_page: Issues the upstream request for a cursor (None = first page).
        consume: Folds a page into caller accumulators and returns its cursor info.
        max_pages: Hard ceiling on requests, whatever ``hasNextPage`` claims.

    Returns:
        Number of pages fetched.
    """
    cursor: str | None = None
    pages = 0
    has_next = True

    while has_next and pages < max_pages:
        page = await fetch_page(cursor)
        pages += 1
        info = consume(page)
        cursor = info.end_cursor
        has_next = info.has_next_page and info.item_count > 0 and cursor is not None

    if has_next:
        logger.info("Pagination stopped at the %d-page ceiling", max_pages)
    return pages
