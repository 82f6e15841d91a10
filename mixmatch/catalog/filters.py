from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Tuple

from mixmatch.core.taxonomy import classify
from mixmatch.schemas.items import Item
from mixmatch.services.feed.types import CHRONOLOGICAL_SORT, FeedFilters

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _norm(s: str | None) -> str:
    return (s or "").strip().lower()


def _created(item: Item) -> datetime:
    ts = item.created_at
    if ts is None:
        return _EPOCH
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def matches_category(item: Item, category: str) -> bool:
    want = _norm(category)
    return _norm(item.category) == want or classify(item.category).value == want


def matches_filters(item: Item, filters: FeedFilters) -> bool:
    if filters.category and not matches_category(item, filters.category):
        return False
    if filters.gender and _norm(item.gender) not in (_norm(filters.gender), "unisex"):
        return False
    if filters.sizes and _norm(item.size) not in {_norm(s) for s in filters.sizes}:
        return False
    if filters.condition and filters.condition != "All" and _norm(item.condition) != _norm(filters.condition):
        return False
    if filters.min_price is not None and item.price < filters.min_price:
        return False
    if filters.max_price is not None and item.price > filters.max_price:
        return False
    if filters.tag and _norm(filters.tag) not in {_norm(t) for t in item.tags}:
        return False
    if filters.query:
        q = _norm(filters.query)
        haystack = " ".join([item.title, item.brand or "", item.category or "", *item.tags]).lower()
        if q not in haystack:
            return False
    return True


def apply_filters(items: Iterable[Item], filters: FeedFilters) -> List[Item]:
    return [it for it in items if matches_filters(it, filters)]


SORT_KEYS: Dict[str, Tuple[Callable[[Item], object], bool]] = {
    "price-asc": (lambda it: it.price, False),
    "price-desc": (lambda it: it.price, True),
    "name-asc": (lambda it: it.title.lower(), False),
    "name-desc": (lambda it: it.title.lower(), True),
    "date-asc": (_created, False),
    "date-desc": (_created, True),
}
# aliases used by the shop screens
SORT_KEYS["Price Low to High"] = SORT_KEYS["price-asc"]
SORT_KEYS["Price High to Low"] = SORT_KEYS["price-desc"]
SORT_KEYS["Latest"] = SORT_KEYS["date-desc"]


def sort_items(items: Iterable[Item], sort: str | None) -> List[Item]:
    key, reverse = SORT_KEYS.get(sort or CHRONOLOGICAL_SORT, SORT_KEYS[CHRONOLOGICAL_SORT])
    # id first so equal keys still come back in one fixed order
    by_id = sorted(items, key=lambda it: it.id or "", reverse=reverse)
    return sorted(by_id, key=key, reverse=reverse)
