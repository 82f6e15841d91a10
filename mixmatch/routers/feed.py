import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mixmatch.catalog.providers.base import CatalogStore
from mixmatch.catalog.ranking import CatalogRankingSource, normalize_seed
from mixmatch.routers.deps import get_catalog_store
from mixmatch.schemas.feed import FeedPageOut
from mixmatch.services.feed.types import FeedFilters, FeedMode, PageRequest

router = APIRouter(tags=["feed"])
logger = logging.getLogger("uvicorn.error")


def _split_sizes(raw: Optional[str]) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(s.strip() for s in raw.split(",") if s.strip())


@router.get("/feed", response_model=FeedPageOut)
async def get_feed(
    mode: FeedMode = Query(FeedMode.TRENDING),
    seed: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=50, alias="pageSize"),
    category: Optional[str] = None,
    gender: Optional[str] = None,
    sizes: Optional[str] = None,
    condition: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    q: Optional[str] = None,
    tag: Optional[str] = None,
    sort: Optional[str] = None,
    store: CatalogStore = Depends(get_catalog_store),
):
    filters = FeedFilters(
        category=category,
        gender=gender,
        sizes=_split_sizes(sizes),
        condition=condition,
        min_price=min_price,
        max_price=max_price,
        query=q,
        tag=tag,
        sort=sort,
    )
    effective_seed = normalize_seed(seed, int(time.time() * 1000))
    request = PageRequest(mode=mode, seed=effective_seed, page=page, page_size=page_size, filters=filters)
    try:
        result = await CatalogRankingSource(store).fetch_page(request)
    except Exception as e:
        logger.exception("feed: ranking failed mode=%s page=%s", mode.value, page)
        raise HTTPException(status_code=502, detail="Ranking unavailable") from e
    return FeedPageOut(
        items=result.items,
        total=result.total,
        has_more=result.has_more_hint,
        page=page,
        seed=effective_seed,
        mode=mode.value,
    )
