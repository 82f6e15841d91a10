from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Sequence

from mixmatch.core.errors import ScoringUnavailable
from mixmatch.core.taxonomy import classify
from mixmatch.schemas.items import Item
from mixmatch.schemas.scoring import MatchBaseItem, MatchCandidate, MatchRequest
from mixmatch.services.scoring.providers.base import ScoringProvider
from mixmatch.services.scoring.rules import (
    clamp,
    extract_color,
    extract_style,
    rule_score,
    signals_from_title,
)

logger = logging.getLogger("mixmatch.scoring")

ScoreSource = Literal["model", "fallback", "empty"]


@dataclass(frozen=True)
class ScoreResult:
    scores: Dict[str, float] = field(default_factory=dict)
    reasons: Dict[str, str] = field(default_factory=dict)
    source: ScoreSource = "empty"


def build_match_request(base: Item, candidates: Sequence[Item]) -> MatchRequest:
    return MatchRequest(
        base_item=MatchBaseItem(
            title=base.title,
            category=classify(base.category).value,
            tags=list(base.tags),
            color=extract_color(base.title),
            style=extract_style(base.title),
        ),
        items=[
            MatchCandidate(
                id=c.id,
                title=c.title,
                category=c.category,
                tags=list(c.tags),
                color=extract_color(c.title),
                style=extract_style(c.title),
            )
            for c in candidates
        ],
    )


def fallback_scores(base: Item, candidates: Sequence[Item]) -> ScoreResult:
    base_sig = signals_from_title(base.title, base.tags)
    scores: Dict[str, float] = {}
    reasons: Dict[str, str] = {}
    for c in candidates:
        res = rule_score(base_sig, signals_from_title(c.title, c.tags))
        scores[c.id] = res.score
        reasons[c.id] = res.reason
    return ScoreResult(scores=scores, reasons=reasons, source="fallback")


class CompatibilityScorer:
    """Scores candidates of one slot against a base item.

    Never raises because of the remote model: any failure there is answered
    with rule-based scores for every candidate.
    """

    def __init__(self, provider: Optional[ScoringProvider] = None, *, timeout_ms: int = 8000) -> None:
        if provider is None:
            from mixmatch.services.scoring.providers.base import NullScoringProvider

            provider = NullScoringProvider()
        self.provider = provider
        self.timeout_ms = timeout_ms

    async def score(self, base: Item, candidates: Sequence[Item]) -> Dict[str, float]:
        return (await self.score_detailed(base, candidates)).scores

    async def score_detailed(self, base: Item, candidates: Sequence[Item]) -> ScoreResult:
        candidates = [c for c in candidates if c.has_identity]
        if not candidates:
            return ScoreResult()
        request = build_match_request(base, candidates)
        try:
            resp = await self.provider.score(request, timeout_ms=self.timeout_ms)
        except ScoringUnavailable as e:
            logger.info("scoring:fallback base=%s items=%s reason=%s", base.id, len(candidates), e)
            return fallback_scores(base, candidates)
        except Exception:
            logger.exception("scoring:provider error base=%s items=%s", base.id, len(candidates))
            return fallback_scores(base, candidates)

        scores: Dict[str, float] = {}
        reasons: Dict[str, str] = {}
        for s in resp.scores:
            if not math.isfinite(s.score):
                logger.info("scoring:drop non-finite score item=%s", s.item_id)
                continue
            scores[s.item_id] = clamp(s.score)
            if s.reason:
                reasons[s.item_id] = s.reason
        return ScoreResult(scores=scores, reasons=reasons, source="model")
