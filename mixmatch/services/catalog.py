from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from mixmatch.catalog.providers.base import CatalogStore
from mixmatch.catalog.providers.in_memory import InMemoryCatalogStore
from mixmatch.core.cache import ItemCache
from mixmatch.core.config import settings
from mixmatch.core.errors import FetchResult
from mixmatch.schemas.items import Item
from mixmatch.services.feed.types import FeedFilters

logger = logging.getLogger("mixmatch.catalog")


def build_store(provider: Optional[str] = None) -> CatalogStore:
    name = (provider or settings.CATALOG_PROVIDER or "memory").lower()
    if name == "sql":
        from mixmatch.catalog.providers.sql import SqlCatalogStore
        from mixmatch.core.db import get_sessionmaker

        return SqlCatalogStore(get_sessionmaker())
    return InMemoryCatalogStore()


class CatalogService:
    """Catalog reads for the outfit flow.

    Owns the listing-detail cache; store failures come back as FetchResult
    errors so the caller picks the placeholder.
    """

    def __init__(self, store: CatalogStore, cache: Optional[ItemCache[Item]] = None) -> None:
        self.store = store
        self.cache = cache or ItemCache(settings.ITEM_CACHE_TTL_S, settings.ITEM_CACHE_MAX)

    async def fetch_pool(self, filters: Optional[FeedFilters] = None) -> FetchResult[List[Item]]:
        try:
            items = await self.store.list_items(filters or FeedFilters())
        except Exception as e:
            logger.warning("catalog:pool fetch failed err=%s", e)
            return FetchResult.failure(str(e) or e.__class__.__name__)
        for it in items:
            if it.has_identity:
                self.cache.set(it.id, it)
        return FetchResult.success(items)

    async def fetch_items(self, ids: Iterable[str]) -> FetchResult[Dict[str, Item]]:
        hits, misses = self.cache.get_many(ids)
        if not misses:
            return FetchResult.success(hits)
        try:
            found = await self.store.get_items(misses)
        except Exception as e:
            logger.warning("catalog:item fetch failed ids=%s err=%s", len(misses), e)
            return FetchResult.failure(str(e) or e.__class__.__name__)
        for item_id, item in found.items():
            self.cache.set(item_id, item)
        hits.update(found)
        return FetchResult.success(hits)
