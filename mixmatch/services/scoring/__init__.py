from __future__ import annotations

from typing import Optional

import httpx

from mixmatch.core.config import settings
from mixmatch.services.scoring.providers.base import NullScoringProvider, ScoringProvider
from mixmatch.services.scoring.providers.remote import HttpScoringProvider
from mixmatch.services.scoring.scorer import CompatibilityScorer, ScoreResult, fallback_scores

__all__ = [
    "CompatibilityScorer",
    "HttpScoringProvider",
    "NullScoringProvider",
    "ScoreResult",
    "ScoringProvider",
    "fallback_scores",
    "get_scorer",
]


def get_scorer(client: Optional[httpx.AsyncClient] = None) -> CompatibilityScorer:
    if not settings.SCORING_ENDPOINT_URL:
        return CompatibilityScorer(NullScoringProvider(), timeout_ms=settings.SCORING_TIMEOUT_MS)
    provider = HttpScoringProvider(settings.SCORING_ENDPOINT_URL, client=client)
    return CompatibilityScorer(provider, timeout_ms=settings.SCORING_TIMEOUT_MS)
