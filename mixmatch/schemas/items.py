from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    """A catalog listing as seen by the matcher and the feed.

    Owned by the catalog store; never mutated here.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    category: Optional[str] = None
    title: str = ""
    price: float = 0.0
    images: List[str] = Field(default_factory=list, validation_alias=AliasChoices("images", "image_urls"))
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = None
    material: Optional[str] = None
    style: Optional[str] = None
    brand: Optional[str] = None
    condition: Optional[str] = None
    size: Optional[str] = None
    gender: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    final_score: Optional[float] = Field(default=None, validation_alias=AliasChoices("final_score", "finalScore"))
    is_boosted: bool = Field(default=False, validation_alias=AliasChoices("is_boosted", "isBoosted"))
    boost_weight: float = Field(default=0.0, ge=0, validation_alias=AliasChoices("boost_weight", "boostWeight"))

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("images", "tags", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("title", mode="before")
    @classmethod
    def _none_to_blank(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("boost_weight", mode="before")
    @classmethod
    def _none_to_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @property
    def has_identity(self) -> bool:
        return bool(self.id and self.id.strip())
