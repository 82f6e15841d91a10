from typing import Dict, Iterable, List, Protocol

from mixmatch.schemas.items import Item
from mixmatch.services.feed.types import FeedFilters


class CatalogStore(Protocol):
    """Read access to listings. This service never writes listings."""

    async def list_items(self, filters: FeedFilters) -> List[Item]:
        ...

    async def get_items(self, ids: Iterable[str]) -> Dict[str, Item]:
        ...

    async def record_promotion_event(self, item_id: str, event_type: str) -> bool:
        ...
