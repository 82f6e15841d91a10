"""Seeded ranking over the catalog store.

This is the server side of the feed contract: for a given seed and item set
the full ordering is fixed, and pages are plain slices of it. That is what
lets a client concatenate pages without repeats or gaps.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, TypeVar

from mixmatch.catalog.filters import sort_items
from mixmatch.catalog.providers.base import CatalogStore
from mixmatch.schemas.items import Item
from mixmatch.services.feed.types import INT32_MAX, FeedFilters, FeedMode, FeedPage, PageRequest

logger = logging.getLogger("mixmatch.feed")

T = TypeVar("T")

_MASK = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


def mulberry32(seed: int) -> Callable[[], float]:
    t = (seed & _MASK) or 1

    def rng() -> float:
        nonlocal t
        t = (t + 0x6D2B79F5) & _MASK
        r = _imul(t ^ (t >> 15), 1 | t)
        r = (r ^ ((r + _imul(r ^ (r >> 7), 61 | r)) & _MASK)) & _MASK
        return ((r ^ (r >> 14)) & _MASK) / 4294967296

    return rng


def shuffle_with_seed(items: Sequence[T], seed: Optional[int]) -> List[T]:
    arr = list(items)
    if seed is None:
        return arr
    rng = mulberry32(seed)
    for i in range(len(arr) - 1, 0, -1):
        j = int(rng() * (i + 1))
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def normalize_seed(raw: Optional[int], default: int) -> int:
    value = raw if raw is not None else default
    return abs(value % INT32_MAX)


def effective_score(item: Item) -> float:
    score = item.final_score or 0.0
    if item.is_boosted:
        score += item.boost_weight
    return score


def affinity(item: Item, filters: FeedFilters) -> float:
    score = item.boost_weight if item.is_boosted else 0.0
    if filters.tag and filters.tag.lower() in {t.lower() for t in item.tags}:
        score += 1.0
    return score


def rank(items: Sequence[Item], mode: FeedMode, seed: int, filters: FeedFilters) -> List[Item]:
    """Full ordering for one seed; ties are broken by the seeded shuffle."""
    if mode == FeedMode.SEARCH:
        return sort_items(items, filters.sort)
    # canonical order first so the store's return order does not leak in
    base = sorted(items, key=lambda it: it.id or "")
    shuffled = shuffle_with_seed(base, seed)
    if mode == FeedMode.TRENDING:
        return sorted(shuffled, key=effective_score, reverse=True)
    return sorted(shuffled, key=lambda it: affinity(it, filters), reverse=True)


def paginate(ranked: Sequence[Item], page: int, page_size: int) -> FeedPage:
    offset = max(page - 1, 0) * page_size
    chunk = list(ranked[offset : offset + page_size])
    total = len(ranked)
    return FeedPage(items=chunk, total=total, has_more_hint=offset + len(chunk) < total)


class CatalogRankingSource:
    """RankingSource backed directly by a catalog store."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    async def fetch_page(self, request: PageRequest) -> FeedPage:
        filters = request.filters
        if request.mode != FeedMode.SEARCH and filters.tag:
            # outside search the tag is an affinity signal, not a filter
            filters = replace(filters, tag=None)
        items = await self.store.list_items(filters)
        ranked = rank(items, request.mode, request.seed, request.filters)
        page = paginate(ranked, request.page, request.page_size)
        logger.debug(
            "ranking mode=%s seed=%s page=%s size=%s total=%s",
            request.mode.value,
            request.seed,
            request.page,
            request.page_size,
            page.total,
        )
        return page
