from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchBaseItem(BaseModel):
    title: str = ""
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = None
    style: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, v):
        return [] if v is None else v


class MatchCandidate(MatchBaseItem):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        return str(v) if v is not None else v


class MatchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_item: MatchBaseItem = Field(alias="baseItem")
    items: List[MatchCandidate]


class MatchScore(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(alias="itemId")
    score: float
    reason: Optional[str] = None

    @field_validator("item_id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        return str(v) if v is not None else v


class MatchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    scores: List[MatchScore] = Field(default_factory=list)
    source: Optional[str] = None
