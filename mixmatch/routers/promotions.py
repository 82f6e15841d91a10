import logging

from fastapi import APIRouter, Depends, HTTPException

from mixmatch.catalog.providers.base import CatalogStore
from mixmatch.routers.deps import get_catalog_store
from mixmatch.schemas.feed import TrackEventIn, TrackEventOut
from mixmatch.services.feed.telemetry import CLICK, VIEW

router = APIRouter(prefix="/promotions", tags=["promotions"])
logger = logging.getLogger("uvicorn.error")


@router.post("/track", response_model=TrackEventOut)
async def track_promotion(body: TrackEventIn, store: CatalogStore = Depends(get_catalog_store)):
    if not body.listing_id or not body.event_type:
        raise HTTPException(status_code=400, detail="Missing required fields: listingId and eventType")
    if body.event_type not in (VIEW, CLICK):
        raise HTTPException(status_code=400, detail="eventType must be 'view' or 'click'")
    tracked = await store.record_promotion_event(body.listing_id, body.event_type)
    if not tracked:
        logger.info("promotions: no active promotion listing=%s event=%s", body.listing_id, body.event_type)
    return TrackEventOut(success=True, tracked=tracked, event_type=body.event_type)
