from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from mixmatch.core.config import settings
from mixmatch.core.errors import InvalidBaseItemError
from mixmatch.core.taxonomy import OutfitSlot, carousel_slots, classify
from mixmatch.schemas.items import Item
from mixmatch.services.scoring.scorer import CompatibilityScorer

logger = logging.getLogger("mixmatch.outfits")

LOCKABLE_SLOTS = {OutfitSlot.TOPS, OutfitSlot.BOTTOMS, OutfitSlot.SHOES, OutfitSlot.DRESSES}


@dataclass
class OutfitSuggestion:
    base: Item
    tops: List[Item] = field(default_factory=list)
    bottoms: List[Item] = field(default_factory=list)
    shoes: List[Item] = field(default_factory=list)
    accessories: List[Item] = field(default_factory=list)
    fallback: List[Item] = field(default_factory=list)
    score_maps: Dict[OutfitSlot, Dict[str, float]] = field(default_factory=dict)
    locked_slot: Optional[OutfitSlot] = None

    def carousel(self, slot: OutfitSlot) -> List[Item]:
        return getattr(self, slot.value)

    def trimmed(self, limit: int) -> "OutfitSuggestion":
        return OutfitSuggestion(
            base=self.base,
            tops=self.tops[:limit],
            bottoms=self.bottoms[:limit],
            shoes=self.shoes[:limit],
            accessories=self.accessories[:limit],
            fallback=self.fallback,
            score_maps=self.score_maps,
            locked_slot=self.locked_slot,
        )


def sort_by_score(items: Sequence[Item], scores: Dict[str, float]) -> List[Item]:
    # stable: ties keep pool order
    return sorted(items, key=lambda it: scores.get(it.id, 0.0), reverse=True)


class OutfitAssembler:
    def __init__(self, scorer: CompatibilityScorer) -> None:
        self.scorer = scorer

    async def assemble(self, base: Item, pool: Sequence[Item]) -> OutfitSuggestion:
        if base is None or not base.has_identity:
            raise InvalidBaseItemError("base item has no identity")

        base_slot = classify(base.category)
        remaining = [it for it in pool if it.id != base.id]
        fallback = list(remaining) if remaining else [base]

        buckets: Dict[OutfitSlot, List[Item]] = {slot: [] for slot in carousel_slots()}
        for it in remaining:
            slot = classify(it.category)
            if slot in buckets:
                buckets[slot].append(it)
        for slot, bucket in buckets.items():
            if not bucket:
                buckets[slot] = list(fallback)

        locked_slot = base_slot if base_slot in LOCKABLE_SLOTS else None
        to_score = [slot for slot in carousel_slots() if slot != locked_slot]

        results = await asyncio.gather(*(self.scorer.score(base, buckets[slot]) for slot in to_score))
        score_maps: Dict[OutfitSlot, Dict[str, float]] = dict(zip(to_score, results))

        out = OutfitSuggestion(base=base, fallback=fallback, locked_slot=locked_slot, score_maps=score_maps)
        for slot in carousel_slots():
            if slot == locked_slot:
                setattr(out, slot.value, [base])
            else:
                setattr(out, slot.value, sort_by_score(buckets[slot], score_maps[slot]))
        logger.info(
            "outfits:assemble base=%s slot=%s pool=%s locked=%s",
            base.id,
            base_slot.value,
            len(remaining),
            locked_slot.value if locked_slot else None,
        )
        return out

    async def quick_suggestions(self, base: Item, pool: Sequence[Item], limit: Optional[int] = None) -> OutfitSuggestion:
        full = await self.assemble(base, pool)
        return full.trimmed(limit or settings.SUGGEST_QUICK_LIMIT)
