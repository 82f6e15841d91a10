from fastapi import Depends, Request

from mixmatch.catalog.providers.base import CatalogStore
from mixmatch.services.catalog import CatalogService
from mixmatch.services.outfits import OutfitAssembler
from mixmatch.services.scoring import CompatibilityScorer, get_scorer


def get_catalog_store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


def get_catalog_service(request: Request, store: CatalogStore = Depends(get_catalog_store)) -> CatalogService:
    # one service (and cache) per app, rebuilt if the store is swapped
    svc = getattr(request.app.state, "catalog_service", None)
    if svc is None or svc.store is not store:
        svc = CatalogService(store)
        request.app.state.catalog_service = svc
    return svc


def get_compatibility_scorer() -> CompatibilityScorer:
    return get_scorer()


def get_assembler(scorer: CompatibilityScorer = Depends(get_compatibility_scorer)) -> OutfitAssembler:
    return OutfitAssembler(scorer)
