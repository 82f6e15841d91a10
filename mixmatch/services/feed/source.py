from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from mixmatch.core.errors import FeedFetchError
from mixmatch.schemas.feed import FeedPageOut
from mixmatch.services.feed.types import FeedPage, PageRequest

logger = logging.getLogger("mixmatch.feed")


class RankingSource(Protocol):
    """Source of truth for ranked pages; raises FeedFetchError on failure."""

    async def fetch_page(self, request: PageRequest) -> FeedPage:
        ...


class HttpRankingSource:
    def __init__(self, url: str, *, timeout_ms: int = 10000, client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = url
        self.timeout_ms = timeout_ms
        self.client = client

    async def _get(self, client: httpx.AsyncClient, params: dict) -> httpx.Response:
        return await asyncio.wait_for(
            client.get(self.url, params=params, timeout=self.timeout_ms / 1000.0),
            timeout=self.timeout_ms / 1000.0,
        )

    async def fetch_page(self, request: PageRequest) -> FeedPage:
        params = request.to_params()
        start = time.perf_counter()
        try:
            if self.client is not None:
                resp = await self._get(self.client, params)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._get(client, params)
        except asyncio.TimeoutError as e:
            logger.warning("feed:http timeout url=%s page=%s", self.url, request.page)
            raise FeedFetchError("ranking request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("feed:http transport error url=%s err=%s", self.url, e)
            raise FeedFetchError("ranking request failed") from e

        latency_ms = int((time.perf_counter() - start) * 1000)
        if not resp.is_success:
            logger.warning("feed:http status=%s page=%s latency_ms=%s", resp.status_code, request.page, latency_ms)
            raise FeedFetchError(f"ranking request returned {resp.status_code}", status_code=resp.status_code)
        try:
            body = FeedPageOut.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise FeedFetchError("ranking response malformed", status_code=resp.status_code) from e

        logger.debug(
            "feed:http mode=%s seed=%s page=%s items=%s total=%s latency_ms=%s",
            request.mode.value,
            request.seed,
            request.page,
            len(body.items),
            body.total,
            latency_ms,
        )
        return FeedPage(items=list(body.items), total=body.total, has_more_hint=body.has_more)
