from __future__ import annotations

from typing import Optional

import httpx

from mixmatch.core.config import settings
from mixmatch.services.feed.engine import SeededRankingFeed
from mixmatch.services.feed.source import HttpRankingSource, RankingSource
from mixmatch.services.feed.telemetry import (
    HttpTelemetrySink,
    LogTelemetrySink,
    TelemetrySink,
    ViewTracker,
    get_telemetry_sink,
)
from mixmatch.services.feed.types import (
    FeedFilters,
    FeedMode,
    FeedPage,
    FeedPreferences,
    FeedState,
    FeedStatus,
    PageRequest,
)

__all__ = [
    "FeedFilters",
    "FeedMode",
    "FeedPage",
    "FeedPreferences",
    "FeedState",
    "FeedStatus",
    "HttpRankingSource",
    "HttpTelemetrySink",
    "LogTelemetrySink",
    "PageRequest",
    "RankingSource",
    "SeededRankingFeed",
    "TelemetrySink",
    "ViewTracker",
    "open_feed",
]


def open_feed(
    *,
    client: Optional[httpx.AsyncClient] = None,
    preferences: Optional[FeedPreferences] = None,
) -> SeededRankingFeed:
    """A new, independent feed session against the configured ranking endpoint."""
    source = HttpRankingSource(settings.RANKING_ENDPOINT_URL, timeout_ms=settings.RANKING_TIMEOUT_MS, client=client)
    return SeededRankingFeed(
        source,
        page_size=settings.FEED_PAGE_SIZE,
        telemetry=get_telemetry_sink(client),
        preferences=preferences,
    )
