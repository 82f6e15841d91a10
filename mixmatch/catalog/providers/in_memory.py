from typing import Dict, Iterable, List

from mixmatch.catalog.filters import apply_filters
from mixmatch.schemas.items import Item
from mixmatch.services.feed.types import FeedFilters


class InMemoryCatalogStore:
    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: Dict[str, Item] = {}
        self._promotions: Dict[str, Dict[str, int]] = {}
        self.upsert_many(items)

    def upsert(self, item: Item) -> None:
        self._items[item.id] = item

    def upsert_many(self, items: Iterable[Item]) -> None:
        for item in items:
            self._items[item.id] = item

    def remove(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    def promotion_counts(self, item_id: str) -> Dict[str, int]:
        return dict(self._promotions.get(item_id, {"view": 0, "click": 0}))

    async def list_items(self, filters: FeedFilters) -> List[Item]:
        return apply_filters(self._items.values(), filters)

    async def get_items(self, ids: Iterable[str]) -> Dict[str, Item]:
        return {i: self._items[i] for i in ids if i in self._items}

    async def record_promotion_event(self, item_id: str, event_type: str) -> bool:
        item = self._items.get(item_id)
        if item is None or not item.is_boosted:
            return False
        counts = self._promotions.setdefault(item_id, {"view": 0, "click": 0})
        counts[event_type] = counts.get(event_type, 0) + 1
        return True
