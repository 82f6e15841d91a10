from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from mixmatch.schemas.items import Item

INT32_MAX = 2_147_483_647


class FeedMode(str, Enum):
    PERSONALIZED = "personalized"
    TRENDING = "trending"
    SEARCH = "search"


class FeedStatus(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    EXHAUSTED = "exhausted"
    CLOSED = "closed"


# Deterministic ordering used when a personalized request cannot be ranked.
CHRONOLOGICAL_SORT = "date-desc"


@dataclass(frozen=True)
class FeedFilters:
    category: Optional[str] = None
    gender: Optional[str] = None
    sizes: Tuple[str, ...] = ()
    condition: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    query: Optional[str] = None
    tag: Optional[str] = None
    sort: Optional[str] = None

    @property
    def has_price_range(self) -> bool:
        return self.min_price is not None or self.max_price is not None

    def exceeds_ranking(self) -> bool:
        """Price range, condition and size together cannot be ranked."""
        return self.has_price_range and bool(self.condition) and bool(self.sizes)

    def with_sort(self, sort: str) -> "FeedFilters":
        return replace(self, sort=sort)

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.category:
            params["category"] = self.category
        if self.gender:
            params["gender"] = self.gender
        if self.sizes:
            params["sizes"] = ",".join(self.sizes)
        if self.condition:
            params["condition"] = self.condition
        if self.min_price is not None:
            params["minPrice"] = self.min_price
        if self.max_price is not None:
            params["maxPrice"] = self.max_price
        if self.query:
            params["q"] = self.query
        if self.tag:
            params["tag"] = self.tag
        if self.sort:
            params["sort"] = self.sort
        return params


@dataclass(frozen=True)
class PageRequest:
    mode: FeedMode
    seed: int
    page: int
    page_size: int
    filters: FeedFilters = field(default_factory=FeedFilters)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "mode": self.mode.value,
            "seed": self.seed,
            "page": self.page,
            "pageSize": self.page_size,
        }
        params.update(self.filters.to_params())
        return params


@dataclass(frozen=True)
class FeedPage:
    items: List[Item]
    total: Optional[int] = None
    has_more_hint: Optional[bool] = None


@dataclass
class FeedSession:
    """Mutable per-view state. Owned by exactly one SeededRankingFeed."""

    mode: FeedMode = FeedMode.TRENDING
    filters: FeedFilters = field(default_factory=FeedFilters)
    seed: Optional[int] = None
    page: int = 0
    page_size: int = 20
    items: List[Item] = field(default_factory=list)
    seen_ids: Set[str] = field(default_factory=set)
    total_count: Optional[int] = None
    fetched_count: int = 0
    has_more: bool = False
    status: FeedStatus = FeedStatus.EMPTY


@dataclass(frozen=True)
class FeedState:
    items: Tuple[Item, ...]
    mode: FeedMode
    filters: FeedFilters
    seed: Optional[int]
    page: int
    page_size: int
    total_count: Optional[int]
    fetched_count: int
    has_more: bool
    status: FeedStatus
    loading: bool = False

    @property
    def item_ids(self) -> List[str]:
        return [it.id for it in self.items]


@dataclass(frozen=True)
class FeedPreferences:
    """Client-side display preferences applied to each incoming batch."""

    prefer_images_first: bool = False
    hide_unknown_brand: bool = False
