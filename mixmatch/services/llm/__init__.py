from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from mixmatch.core.config import settings
from mixmatch.schemas.scoring import MatchRequest, MatchResponse, MatchScore
from mixmatch.services.llm.providers.base import LLMProvider, NullProvider
from mixmatch.services.llm.prompts import PROMPT_VERSION
from mixmatch.services.llm.types import MatchItemsInput
from mixmatch.services.scoring.rules import Signals, clamp, rule_score

logger = logging.getLogger("mixmatch.scoring")

_provider: LLMProvider | None = None


def _get_provider() -> LLMProvider:
    global _provider
    if _provider:
        return _provider
    if not settings.LLM_ENABLED:
        _provider = NullProvider()
        return _provider
    name = (settings.LLM_PROVIDER or "local").lower()
    if name == "openai":
        from mixmatch.services.llm.providers.openai import OpenAIProvider

        _provider = OpenAIProvider(settings.LLM_MODEL_MATCH)
    else:
        _provider = NullProvider()
    return _provider


def set_provider(provider: LLMProvider | None) -> None:
    global _provider
    _provider = provider


def rule_scores(request: MatchRequest) -> List[MatchScore]:
    """Scores from the colour/style/tags the caller already derived."""
    base = request.base_item
    base_sig = Signals(color=base.color, style=base.style, tags=tuple(base.tags))
    out: List[MatchScore] = []
    for c in request.items:
        res = rule_score(base_sig, Signals(color=c.color, style=c.style, tags=tuple(c.tags)))
        out.append(MatchScore(item_id=c.id, score=res.score, reason=res.reason))
    return out


async def _model_scores(request: MatchRequest) -> List[MatchScore]:
    payload = MatchItemsInput(
        base_item=request.base_item.model_dump(),
        candidates=[c.model_dump() for c in request.items],
        prompt_version=PROMPT_VERSION,
    )
    provider = _get_provider()
    timeout_ms = settings.LLM_MATCH_TIMEOUT_MS
    out = await asyncio.wait_for(provider.match_items(payload, timeout_ms=timeout_ms), timeout=timeout_ms / 1000.0 + 0.1)
    wanted: Dict[str, bool] = {c.id: True for c in request.items}
    return [
        MatchScore(item_id=s.item_id, score=clamp(s.score), reason=s.reason)
        for s in out.scores
        if s.item_id in wanted
    ]


async def match_items(request: MatchRequest) -> MatchResponse:
    """Model scores when the model answers, rule scores otherwise."""
    scores: List[MatchScore] = []
    source = "ai"
    try:
        scores = await _model_scores(request)
    except asyncio.TimeoutError:
        logger.warning("match:model timeout items=%s", len(request.items))
    except Exception:
        logger.exception("match:model error items=%s", len(request.items))
    if not scores:
        source = "fallback"
        scores = rule_scores(request)
    scores.sort(key=lambda s: s.score, reverse=True)
    return MatchResponse(success=True, scores=scores, source=source)
