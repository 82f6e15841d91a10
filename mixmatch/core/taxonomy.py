from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar


class OutfitSlot(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    DRESSES = "dresses"
    OTHER = "other"


# (keywords, slot, priority); higher priority is checked first.
CATEGORY_RULES: List[Tuple[Tuple[str, ...], OutfitSlot, int]] = [
    (("dress",), OutfitSlot.DRESSES, 10),
    (
        ("top", "shirt", "tee", "t-shirt", "blouse", "sweater", "hoodie", "cardigan", "turtleneck", "tank"),
        OutfitSlot.TOPS,
        5,
    ),
    (("outerwear", "coat", "jacket", "blazer", "vest"), OutfitSlot.TOPS, 4),
    (("bottom", "pant", "trouser", "jean", "legging", "short", "skirt"), OutfitSlot.BOTTOMS, 5),
    (("shoe", "sneaker", "boot", "heel", "loafer", "flat", "footwear", "sandal"), OutfitSlot.SHOES, 5),
    (
        ("accessory", "bag", "belt", "bracelet", "earring", "necklace", "ring", "scarf", "hat", "watch"),
        OutfitSlot.ACCESSORIES,
        5,
    ),
]

EXACT_MATCHES: Dict[str, OutfitSlot] = {
    "tops": OutfitSlot.TOPS,
    "bottoms": OutfitSlot.BOTTOMS,
    "footwear": OutfitSlot.SHOES,
    "shoes": OutfitSlot.SHOES,
    "accessories": OutfitSlot.ACCESSORIES,
    "dresses": OutfitSlot.DRESSES,
    "outerwear": OutfitSlot.TOPS,
}

DISPLAY_NAMES: Dict[OutfitSlot, str] = {
    OutfitSlot.TOPS: "Tops",
    OutfitSlot.BOTTOMS: "Bottoms",
    OutfitSlot.SHOES: "Shoes",
    OutfitSlot.ACCESSORIES: "Accessories",
    OutfitSlot.DRESSES: "Dresses",
    OutfitSlot.OTHER: "Other",
}

# sorted() is stable, so equal priorities keep table order
_SORTED_RULES = sorted(CATEGORY_RULES, key=lambda r: r[2], reverse=True)


def classify(label: Optional[str]) -> OutfitSlot:
    if not label:
        return OutfitSlot.OTHER
    normalized = label.strip().lower()
    if not normalized:
        return OutfitSlot.OTHER
    for keywords, slot, _priority in _SORTED_RULES:
        if any(k in normalized for k in keywords):
            return slot
    return EXACT_MATCHES.get(normalized, OutfitSlot.OTHER)


def is_slot(label: Optional[str], slot: OutfitSlot) -> bool:
    return classify(label) == slot


T = TypeVar("T")


def filter_by_slot(items: Iterable[T], slot: OutfitSlot, exclude_id: Optional[str] = None) -> List[T]:
    out: List[T] = []
    for item in items:
        if exclude_id is not None and getattr(item, "id", None) == exclude_id:
            continue
        if is_slot(getattr(item, "category", None), slot):
            out.append(item)
    return out


def all_slots() -> List[OutfitSlot]:
    return list(OutfitSlot)


def slot_display_name(slot: OutfitSlot) -> str:
    return DISPLAY_NAMES.get(slot, str(slot.value))


def carousel_slots() -> Sequence[OutfitSlot]:
    return (OutfitSlot.TOPS, OutfitSlot.BOTTOMS, OutfitSlot.SHOES, OutfitSlot.ACCESSORIES)
