from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class LLMUsage(BaseModel):
    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: int = 0
    prompt_version: str = "p1"


class MatchItemsInput(BaseModel):
    base_item: Dict[str, Any] = Field(default_factory=dict)
    candidates: List[Dict[str, Any]] = Field(default_factory=list)
    prompt_version: str = "p1"


class MatchItemScoreOut(BaseModel):
    item_id: str
    score: float
    reason: Optional[str] = None


class MatchItemsOutput(BaseModel):
    scores: List[MatchItemScoreOut] = Field(default_factory=list)
    usage: LLMUsage = Field(default_factory=LLMUsage)
