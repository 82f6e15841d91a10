import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from mixmatch.core.errors import InvalidBaseItemError
from mixmatch.routers.deps import get_assembler, get_catalog_service
from mixmatch.schemas.outfits import OutfitSuggestIn, OutfitSuggestOut
from mixmatch.schemas.scoring import MatchRequest, MatchResponse
from mixmatch.services import llm as llm_service
from mixmatch.services.catalog import CatalogService
from mixmatch.services.outfits import OutfitAssembler
from mixmatch.services.suggest import suggest_outfit

router = APIRouter(prefix="/outfits", tags=["outfits"])
logger = logging.getLogger("uvicorn.error")


@router.post("/match", response_model=MatchResponse)
async def match_outfit_items(payload: Dict[str, Any] = Body(...)):
    if not payload.get("baseItem") or not isinstance(payload.get("items"), list):
        raise HTTPException(status_code=400, detail="Missing required fields: baseItem and items")
    try:
        req = MatchRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid match request: {e.error_count()} errors")
    if not req.items:
        return MatchResponse(success=True, scores=[], source="empty")
    return await llm_service.match_items(req)


@router.post("/suggest", response_model=OutfitSuggestOut)
async def suggest_outfits(
    body: OutfitSuggestIn,
    assembler: OutfitAssembler = Depends(get_assembler),
    catalog: CatalogService = Depends(get_catalog_service),
):
    try:
        suggestion, warnings = await suggest_outfit(assembler, catalog, body.base_item, body.pool, body.limit)
    except InvalidBaseItemError as e:
        logger.info("outfits:suggest rejected base=%s err=%s", body.base_item.id, e)
        raise HTTPException(status_code=422, detail=str(e))
    return OutfitSuggestOut(
        base=suggestion.base,
        tops=suggestion.tops,
        bottoms=suggestion.bottoms,
        shoes=suggestion.shoes,
        accessories=suggestion.accessories,
        fallback=suggestion.fallback,
        scores={slot.value: scores for slot, scores in suggestion.score_maps.items()},
        locked_slot=suggestion.locked_slot.value if suggestion.locked_slot else None,
        warnings=warnings,
    )
