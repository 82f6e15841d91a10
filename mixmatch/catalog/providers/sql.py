from datetime import datetime, timezone
from typing import Dict, Iterable, List

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mixmatch.catalog.filters import apply_filters
from mixmatch.models.models import Listing, ListingPromotion
from mixmatch.schemas.items import Item
from mixmatch.services.feed.types import FeedFilters


def listing_to_item(row: Listing) -> Item:
    images = [u for u in (row.image_urls or []) if isinstance(u, str) and u]
    if not images and row.image_url:
        images = [row.image_url]
    return Item(
        id=str(row.id),
        title=row.title or "",
        category=row.category,
        price=float(row.price or 0.0),
        images=images,
        tags=list(row.tags or []),
        color=row.color,
        material=row.material,
        style=row.style,
        brand=row.brand,
        condition=row.condition,
        size=row.size,
        gender=row.gender,
        created_at=row.created_at,
        final_score=row.final_score,
        is_boosted=bool(row.is_boosted),
        boost_weight=float(row.boost_weight or 0.0),
    )


def _int_ids(ids: Iterable[str]) -> List[int]:
    out: List[int] = []
    for i in ids:
        try:
            out.append(int(i))
        except (TypeError, ValueError):
            continue
    return out


class SqlCatalogStore:
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self.sessionmaker = sessionmaker

    async def list_items(self, filters: FeedFilters) -> List[Item]:
        stmt = select(Listing).where(Listing.listed.is_(True), Listing.sold.is_(False))
        if filters.min_price is not None:
            stmt = stmt.where(Listing.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Listing.price <= filters.max_price)
        if filters.sizes:
            stmt = stmt.where(func.lower(Listing.size).in_([s.lower() for s in filters.sizes]))
        if filters.query:
            like = f"%{filters.query}%"
            stmt = stmt.where(or_(Listing.title.ilike(like), Listing.brand.ilike(like), Listing.category.ilike(like)))
        stmt = stmt.order_by(Listing.created_at.desc(), Listing.id.desc())
        async with self.sessionmaker() as session:
            res = await session.execute(stmt)
            rows = res.scalars().all()
        # category/condition/gender/tag need the same normalisation as the in-memory store
        return apply_filters([listing_to_item(r) for r in rows], filters)

    async def get_items(self, ids: Iterable[str]) -> Dict[str, Item]:
        int_ids = _int_ids(ids)
        if not int_ids:
            return {}
        async with self.sessionmaker() as session:
            res = await session.execute(select(Listing).where(Listing.id.in_(int_ids)))
            return {str(r.id): listing_to_item(r) for r in res.scalars().all()}

    async def record_promotion_event(self, item_id: str, event_type: str) -> bool:
        ids = _int_ids([item_id])
        if not ids:
            return False
        now = datetime.now(timezone.utc)
        async with self.sessionmaker() as session:
            res = await session.execute(
                select(ListingPromotion)
                .where(
                    ListingPromotion.listing_id == ids[0],
                    ListingPromotion.status == "ACTIVE",
                    or_(ListingPromotion.ends_at.is_(None), ListingPromotion.ends_at > now),
                )
                .order_by(ListingPromotion.created_at.desc(), ListingPromotion.id.desc())
                .limit(1)
            )
            promo = res.scalar_one_or_none()
            if promo is None:
                return False
            if event_type == "view":
                promo.views = (promo.views or 0) + 1
            else:
                promo.clicks = (promo.clicks or 0) + 1
            await session.commit()
            return True
