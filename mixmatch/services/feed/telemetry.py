from __future__ import annotations

import logging
from typing import Optional, Protocol, Set

import httpx

from mixmatch.core.config import settings

logger = logging.getLogger("mixmatch.telemetry")

VIEW = "view"
CLICK = "click"


class ViewTracker:
    """Identities already reported in the current session, per event type."""

    def __init__(self) -> None:
        self._viewed: Set[str] = set()
        self._clicked: Set[str] = set()

    def mark_viewed(self, item_id: str) -> bool:
        """Record a view; returns True when the item was already viewed."""
        if item_id in self._viewed:
            return True
        self._viewed.add(item_id)
        return False

    def mark_clicked(self, item_id: str) -> bool:
        if item_id in self._clicked:
            return True
        self._clicked.add(item_id)
        return False

    def unmark_viewed(self, item_id: str) -> None:
        self._viewed.discard(item_id)

    def unmark_clicked(self, item_id: str) -> None:
        self._clicked.discard(item_id)

    def clear(self) -> None:
        self._viewed.clear()
        self._clicked.clear()

    @property
    def viewed(self) -> frozenset:
        return frozenset(self._viewed)

    @property
    def clicked(self) -> frozenset:
        return frozenset(self._clicked)


class TelemetrySink(Protocol):
    async def record_view(self, item_id: str) -> None:
        ...

    async def record_click(self, item_id: str) -> None:
        ...


class LogTelemetrySink:
    async def record_view(self, item_id: str) -> None:
        logger.info("telemetry view %s", item_id)

    async def record_click(self, item_id: str) -> None:
        logger.info("telemetry click %s", item_id)


class HttpTelemetrySink:
    """Posts promotion events; failures are logged and swallowed."""

    def __init__(self, url: str, *, timeout_ms: int = 3000, client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = url
        self.timeout_ms = timeout_ms
        self.client = client

    async def _send(self, item_id: str, event_type: str) -> None:
        body = {"listingId": item_id, "eventType": event_type}
        try:
            if self.client is not None:
                resp = await self.client.post(self.url, json=body, timeout=self.timeout_ms / 1000.0)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.post(self.url, json=body, timeout=self.timeout_ms / 1000.0)
            if not resp.is_success:
                logger.warning("telemetry %s %s rejected status=%s", event_type, item_id, resp.status_code)
        except httpx.HTTPError as e:
            logger.warning("telemetry %s %s failed: %s", event_type, item_id, e)

    async def record_view(self, item_id: str) -> None:
        await self._send(item_id, VIEW)

    async def record_click(self, item_id: str) -> None:
        await self._send(item_id, CLICK)


def get_telemetry_sink(client: Optional[httpx.AsyncClient] = None) -> TelemetrySink:
    if settings.TELEMETRY_PROVIDER == "http" and settings.TELEMETRY_URL:
        return HttpTelemetrySink(settings.TELEMETRY_URL, timeout_ms=settings.TELEMETRY_TIMEOUT_MS, client=client)
    return LogTelemetrySink()
