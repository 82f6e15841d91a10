from __future__ import annotations

from typing import Protocol

from mixmatch.schemas.scoring import MatchRequest, MatchResponse


class ScoringProvider(Protocol):
    """Remote compatibility model.

    Implementations raise ScoringUnavailable for anything short of a usable
    ``success: true`` answer.
    """

    async def score(self, request: MatchRequest, *, timeout_ms: int) -> MatchResponse:
        ...


class NullScoringProvider:
    """Used when no remote endpoint is configured; always defers to rules."""

    name = "disabled"

    async def score(self, request: MatchRequest, *, timeout_ms: int) -> MatchResponse:
        from mixmatch.core.errors import ScoringUnavailable

        raise ScoringUnavailable("remote scoring disabled")
