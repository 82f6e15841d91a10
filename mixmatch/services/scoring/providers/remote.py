from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from mixmatch.core.errors import ScoringUnavailable
from mixmatch.schemas.scoring import MatchRequest, MatchResponse

logger = logging.getLogger("mixmatch.scoring")


class HttpScoringProvider:
    name = "http"

    def __init__(self, url: str, client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = url
        self.client = client

    async def _post(self, client: httpx.AsyncClient, body: dict, timeout_ms: int) -> httpx.Response:
        return await asyncio.wait_for(
            client.post(self.url, json=body, timeout=timeout_ms / 1000.0),
            timeout=timeout_ms / 1000.0,
        )

    async def score(self, request: MatchRequest, *, timeout_ms: int) -> MatchResponse:
        body = request.model_dump(by_alias=True)
        start = time.perf_counter()
        try:
            if self.client is not None:
                resp = await self._post(self.client, body, timeout_ms)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._post(client, body, timeout_ms)
        except asyncio.TimeoutError as e:
            logger.warning("scoring:http timeout url=%s timeout_ms=%s", self.url, timeout_ms)
            raise ScoringUnavailable("timeout") from e
        except httpx.HTTPError as e:
            logger.warning("scoring:http transport error url=%s err=%s", self.url, e)
            raise ScoringUnavailable("transport_error") from e

        latency_ms = int((time.perf_counter() - start) * 1000)
        if not resp.is_success:
            logger.warning("scoring:http status=%s latency_ms=%s", resp.status_code, latency_ms)
            raise ScoringUnavailable(f"http_{resp.status_code}")
        try:
            parsed = MatchResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.warning("scoring:http malformed body latency_ms=%s", latency_ms)
            raise ScoringUnavailable("malformed_body") from e
        if not parsed.success:
            raise ScoringUnavailable("success_false")
        logger.info("scoring:http ok items=%s scores=%s latency_ms=%s", len(request.items), len(parsed.scores), latency_ms)
        return parsed
