from .catalog_fixtures import (
    dress_example_pool,
    item,
    mixed_pool,
    numbered_items,
)

__all__ = [
    "dress_example_pool",
    "item",
    "mixed_pool",
    "numbered_items",
]
