from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mixmatch.schemas.items import Item


class FeedPageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[Item] = Field(default_factory=list)
    total: Optional[int] = None
    has_more: Optional[bool] = Field(default=None, alias="hasMore")
    page: Optional[int] = None
    seed: Optional[int] = None
    mode: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def _none_items(cls, v):
        return [] if v is None else v


class TrackEventIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    listing_id: Optional[str] = Field(default=None, alias="listingId")
    event_type: Optional[str] = Field(default=None, alias="eventType")

    @field_validator("listing_id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        return str(v) if v is not None else v


class TrackEventOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    tracked: bool
    event_type: Optional[str] = Field(default=None, alias="eventType")
