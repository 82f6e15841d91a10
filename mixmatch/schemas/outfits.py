from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mixmatch.schemas.items import Item


class OutfitSuggestIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_item: Item = Field(alias="baseItem")
    pool: Optional[List[Item]] = None
    limit: Optional[int] = Field(default=None, ge=1, le=100)


class OutfitSuggestOut(BaseModel):
    base: Item
    tops: List[Item] = Field(default_factory=list)
    bottoms: List[Item] = Field(default_factory=list)
    shoes: List[Item] = Field(default_factory=list)
    accessories: List[Item] = Field(default_factory=list)
    fallback: List[Item] = Field(default_factory=list)
    scores: Dict[str, Dict[str, float]] = Field(default_factory=dict)
    locked_slot: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
