import logging
from typing import List, Optional, Sequence

from mixmatch.schemas.items import Item
from mixmatch.services.catalog import CatalogService
from mixmatch.services.outfits import OutfitAssembler, OutfitSuggestion

logger = logging.getLogger("mixmatch.outfits")


def _is_reference(base: Item) -> bool:
    return base.has_identity and not base.category and not (base.title or "").strip()


async def resolve_base(catalog: CatalogService, base: Item, warnings: List[str]) -> Item:
    """Expand an id-only base item to the stored listing."""
    if not _is_reference(base):
        return base
    res = await catalog.fetch_items([base.id])
    if not res.ok:
        warnings.append("catalog_unavailable")
        return base
    found = res.unwrap_or({}).get(base.id)
    if found is None:
        logger.info("outfits:suggest base=%s not in catalog", base.id)
        warnings.append("base_not_found")
        return base
    return found


async def suggest_outfit(
    assembler: OutfitAssembler,
    catalog: CatalogService,
    base: Item,
    pool: Optional[Sequence[Item]] = None,
    limit: Optional[int] = None,
) -> tuple[OutfitSuggestion, List[str]]:
    """Assemble around ``base``, reading the pool from the catalog when not given.

    A base carrying only an id is looked up in the catalog first. Returns the
    suggestion and any warnings for the caller to surface.
    """
    warnings: List[str] = []
    base = await resolve_base(catalog, base, warnings)
    if pool is None:
        res = await catalog.fetch_pool()
        if not res.ok and "catalog_unavailable" not in warnings:
            warnings.append("catalog_unavailable")
        # an empty pool still yields [base] carousels
        pool = res.unwrap_or([])
    if limit:
        suggestion = await assembler.quick_suggestions(base, pool, limit=limit)
    else:
        suggestion = await assembler.assemble(base, pool)
    return suggestion, warnings
