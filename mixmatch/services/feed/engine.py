"""Seeded, paginated ranking feed.

One SeededRankingFeed backs one feed view. All pages of a scroll session are
requested with the same seed so the source can reproduce its ordering; a
refresh or filter change starts over with a new seed. Loads are
single-flight, and a failed load leaves the session exactly as it was.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Set

from mixmatch.core.errors import FeedBusyError, FeedClosedError
from mixmatch.schemas.items import Item
from mixmatch.services.feed.source import RankingSource
from mixmatch.services.feed.telemetry import LogTelemetrySink, TelemetrySink, ViewTracker
from mixmatch.services.feed.types import (
    CHRONOLOGICAL_SORT,
    INT32_MAX,
    FeedFilters,
    FeedMode,
    FeedPage,
    FeedPreferences,
    FeedSession,
    FeedState,
    FeedStatus,
    PageRequest,
)

logger = logging.getLogger("mixmatch.feed")


def new_seed(now_ms: int, previous: Optional[int] = None) -> int:
    seed = abs(now_ms) % INT32_MAX
    if previous is not None and seed == previous:
        seed = (seed + 1) % INT32_MAX
    return seed


def compute_has_more(page_len: int, page_size: int, fetched_count: int, total: Optional[int]) -> bool:
    if page_len < page_size:
        return False
    if total is None:
        return True
    return fetched_count < total


def dedup(batch: List[Item], seen: Set[str]) -> List[Item]:
    """Drops items already in ``seen`` (and repeats within the batch); updates ``seen``."""
    out: List[Item] = []
    for it in batch:
        if not it.has_identity or it.id in seen:
            continue
        seen.add(it.id)
        out.append(it)
    return out


def apply_preferences(batch: List[Item], prefs: FeedPreferences) -> List[Item]:
    result = batch
    if prefs.hide_unknown_brand:
        result = [it for it in result if it.brand and it.brand.strip() and it.brand.strip().lower() != "n/a"]
    if prefs.prefer_images_first:
        result = sorted(result, key=lambda it: (0 if it.images else 1, -(it.final_score or 0.0)))
    return result


class SeededRankingFeed:
    def __init__(
        self,
        source: RankingSource,
        *,
        page_size: int = 20,
        telemetry: Optional[TelemetrySink] = None,
        preferences: Optional[FeedPreferences] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.source = source
        self.telemetry = telemetry or LogTelemetrySink()
        self.preferences = preferences or FeedPreferences()
        self.tracker = ViewTracker()
        self._clock = clock
        self._session = FeedSession(page_size=page_size)
        self._in_flight = False
        self._closed = False
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()

    # -- read side -----------------------------------------------------------

    @property
    def items(self) -> List[Item]:
        return list(self._session.items)

    @property
    def has_more(self) -> bool:
        return self._session.has_more

    @property
    def seed(self) -> Optional[int]:
        return self._session.seed

    @property
    def page(self) -> int:
        return self._session.page

    @property
    def status(self) -> FeedStatus:
        return FeedStatus.CLOSED if self._closed else self._session.status

    @property
    def loading(self) -> bool:
        return self._in_flight

    def snapshot(self) -> FeedState:
        s = self._session
        return FeedState(
            items=tuple(s.items),
            mode=s.mode,
            filters=s.filters,
            seed=s.seed,
            page=s.page,
            page_size=s.page_size,
            total_count=s.total_count,
            fetched_count=s.fetched_count,
            has_more=s.has_more,
            status=self.status,
            loading=self._in_flight,
        )

    # -- operations ----------------------------------------------------------

    async def fresh_load(self, mode: FeedMode, filters: Optional[FeedFilters] = None) -> FeedState:
        return await self._start(mode, filters or FeedFilters())

    async def refresh(self) -> FeedState:
        return await self._start(self._session.mode, self._session.filters, clear_reported=True)

    async def filter_change(self, filters: FeedFilters) -> FeedState:
        return await self._start(self._session.mode, filters)

    async def load_more(self) -> FeedState:
        s = self._session
        if self._closed or self._in_flight or not s.has_more or s.seed is None:
            return self.snapshot()

        request = self._build_request(s.mode, s.filters, s.seed, s.page + 1)
        page = await self._fetch(request)
        if page is None:
            return self.snapshot()

        seen = set(s.seen_ids)
        fresh = dedup(apply_preferences(page.items, self.preferences), seen)
        fetched = s.fetched_count + len(page.items)
        total = page.total if page.total is not None else s.total_count
        has_more = compute_has_more(len(page.items), s.page_size, fetched, total)
        self._log_hint(page, has_more)

        s.items = s.items + fresh
        s.seen_ids = seen
        s.page = request.page
        s.fetched_count = fetched
        s.total_count = total
        s.has_more = has_more
        s.status = FeedStatus.LOADED if has_more else FeedStatus.EXHAUSTED
        logger.info(
            "feed:load_more mode=%s seed=%s page=%s new=%s dropped=%s total=%s has_more=%s",
            s.mode.value,
            s.seed,
            s.page,
            len(fresh),
            len(page.items) - len(fresh),
            total,
            has_more,
        )
        return self.snapshot()

    def close(self) -> None:
        """Tear the session down; results still in flight are discarded."""
        self._closed = True
        self._generation += 1
        for task in list(self._pending):
            task.cancel()

    # -- telemetry -----------------------------------------------------------

    def record_view(self, item_id: str) -> bool:
        """Report a view once per session; returns True when it was reported now."""
        if self.tracker.mark_viewed(item_id):
            return False
        if self._is_boosted(item_id) and not self._dispatch(self.telemetry.record_view, item_id):
            self.tracker.unmark_viewed(item_id)
            return False
        return True

    def record_click(self, item_id: str) -> bool:
        if self.tracker.mark_clicked(item_id):
            return False
        if self._is_boosted(item_id) and not self._dispatch(self.telemetry.record_click, item_id):
            self.tracker.unmark_clicked(item_id)
            return False
        return True

    async def flush_telemetry(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -- internals -----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise FeedClosedError("feed session is closed")

    async def _start(self, mode: FeedMode, filters: FeedFilters, *, clear_reported: bool = False) -> FeedState:
        self._ensure_open()
        if self._in_flight:
            raise FeedBusyError("feed load already in flight")
        s = self._session
        seed = new_seed(int(self._clock() * 1000), previous=s.seed)
        request = self._build_request(mode, filters, seed, 1)
        page = await self._fetch(request)
        if page is None:
            return self.snapshot()

        seen: Set[str] = set()
        fresh = dedup(apply_preferences(page.items, self.preferences), seen)
        has_more = compute_has_more(len(page.items), s.page_size, len(page.items), page.total)
        self._log_hint(page, has_more)

        self._session = FeedSession(
            mode=mode,
            filters=filters,
            seed=seed,
            page=1,
            page_size=s.page_size,
            items=fresh,
            seen_ids=seen,
            total_count=page.total,
            fetched_count=len(page.items),
            has_more=has_more,
            status=FeedStatus.LOADED if has_more else FeedStatus.EXHAUSTED,
        )
        if clear_reported:
            self.tracker.clear()
        logger.info(
            "feed:fresh_load mode=%s seed=%s items=%s total=%s has_more=%s",
            mode.value,
            seed,
            len(fresh),
            page.total,
            has_more,
        )
        return self.snapshot()

    def _build_request(self, mode: FeedMode, filters: FeedFilters, seed: int, page: int) -> PageRequest:
        page_size = self._session.page_size
        if mode == FeedMode.PERSONALIZED and filters.exceeds_ranking():
            logger.info("feed:degraded personalized->chronological page=%s seed=%s", page, seed)
            return PageRequest(
                mode=FeedMode.SEARCH,
                seed=seed,
                page=page,
                page_size=page_size,
                filters=filters if filters.sort else filters.with_sort(CHRONOLOGICAL_SORT),
            )
        return PageRequest(mode=mode, seed=seed, page=page, page_size=page_size, filters=filters)

    async def _fetch(self, request: PageRequest) -> Optional[FeedPage]:
        """Runs one guarded request; None means the result must be discarded."""
        generation = self._generation
        self._in_flight = True
        try:
            page = await self.source.fetch_page(request)
        finally:
            self._in_flight = False
        if self._closed or generation != self._generation:
            logger.debug("feed:discard stale page=%s seed=%s", request.page, request.seed)
            return None
        return page

    def _log_hint(self, page: FeedPage, has_more: bool) -> None:
        if page.has_more_hint is not None and page.has_more_hint != has_more:
            logger.debug("feed:has_more hint=%s derived=%s", page.has_more_hint, has_more)

    def _is_boosted(self, item_id: str) -> bool:
        return any(it.id == item_id and it.is_boosted for it in self._session.items)

    def _dispatch(self, send: Callable, item_id: str) -> bool:
        """Schedules one sink call; False when nothing could be scheduled."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("telemetry dropped for %s: no running event loop", item_id)
            return False
        try:
            coro = send(item_id)
        except Exception:
            logger.warning("telemetry sink raised for %s", item_id, exc_info=True)
            return False
        task = loop.create_task(self._guarded(coro))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _guarded(self, coro) -> None:
        try:
            await coro
        except Exception:
            logger.warning("telemetry sink raised", exc_info=True)


__all__ = [
    "SeededRankingFeed",
    "apply_preferences",
    "compute_has_more",
    "dedup",
    "new_seed",
]
