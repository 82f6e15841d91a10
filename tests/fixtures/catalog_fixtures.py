"""
Synthetic catalog listings shared by the matcher and feed tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, List

from mixmatch.schemas.items import Item

_T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def item(id: Any, category: str | None = None, title: str = "", **kw: Any) -> Item:
    """Item with just enough fields set for the test at hand."""
    return Item(id=id, category=category, title=title, **kw)


def mixed_pool() -> List[Item]:
    """One or two listings per carousel slot."""
    return [
        item("t1", "Tops", "White Cotton Tee", tags=["cotton", "basic"]),
        item("t2", "Shirt", "Blue Oxford Shirt", tags=["formal"]),
        item("p1", "Jeans", "Black Slim Jeans", tags=["denim"]),
        item("s1", "Sneakers", "White Leather Sneakers", tags=["leather"]),
        item("a1", "Bag", "Beige Tote Bag", tags=["leather"]),
    ]


def dress_example_pool() -> List[Item]:
    return [
        item("p1", "Tops", "Black Silk Blouse"),
        item("p2", "Pants", "White Wide Trousers"),
        item("p3", "Heels", "Black Strappy Heels"),
        item("p4", "Necklace", "Gold Chain Necklace"),
        item("p5", "Jacket", "Beige Trench Jacket"),
    ]


def numbered_items(n: int, *, boosted_every: int = 0) -> List[Item]:
    """Listings i0..i{n-1} with distinct prices, scores and creation times."""
    out: List[Item] = []
    for i in range(n):
        boosted = bool(boosted_every) and i % boosted_every == 0
        out.append(
            item(
                f"i{i}",
                "Tops",
                f"Item {i:03d}",
                price=float(10 + i),
                final_score=float(i % 7),
                is_boosted=boosted,
                boost_weight=2.0 if boosted else 0.0,
                created_at=_T0 + timedelta(hours=i),
                tags=["vintage"] if i % 3 == 0 else ["basic"],
            )
        )
    return out
