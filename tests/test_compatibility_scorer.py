import asyncio
import json

import httpx
import pytest

from mixmatch.core.errors import ScoringUnavailable
from mixmatch.schemas.scoring import MatchRequest, MatchResponse, MatchScore
from mixmatch.services.scoring import CompatibilityScorer, HttpScoringProvider
from tests.fixtures import item

BASE = item("b1", "Tops", "Black Cotton Tee", tags=["cotton"])
CANDIDATES = [
    item("c1", "Jeans", "White Jeans", tags=["cotton"]),
    item("c2", "Jeans", "Red Formal Trousers"),
]


class RecordingProvider:
    def __init__(self, response=None, exc=None, delay=0.0):
        self.response = response
        self.exc = exc
        self.delay = delay
        self.requests: list[MatchRequest] = []

    async def score(self, request: MatchRequest, *, timeout_ms: int) -> MatchResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc:
            raise self.exc
        return self.response


@pytest.mark.asyncio
async def test_empty_candidates_makes_no_call():
    prov = RecordingProvider(response=MatchResponse(success=True))
    scorer = CompatibilityScorer(prov)
    assert await scorer.score(BASE, []) == {}
    assert await scorer.score(BASE, [item(None, "Jeans", "No id")]) == {}
    assert prov.requests == []


@pytest.mark.asyncio
async def test_model_scores_used_and_missing_ids_omitted():
    resp = MatchResponse(success=True, scores=[MatchScore(item_id="c1", score=91, reason="classic pairing")])
    prov = RecordingProvider(response=resp)
    result = await CompatibilityScorer(prov).score_detailed(BASE, CANDIDATES)
    assert result.source == "model"
    assert result.scores == {"c1": 91}
    assert "c2" not in result.scores
    assert result.reasons["c1"] == "classic pairing"


@pytest.mark.asyncio
async def test_request_carries_slot_color_and_style():
    prov = RecordingProvider(response=MatchResponse(success=True))
    await CompatibilityScorer(prov).score(BASE, CANDIDATES)
    req = prov.requests[0]
    assert req.base_item.category == "tops"
    assert req.base_item.color == "black"
    assert req.base_item.style == "casual"
    assert [c.id for c in req.items] == ["c1", "c2"]
    assert req.items[1].style == "formal"


@pytest.mark.asyncio
async def test_model_scores_clamped():
    resp = MatchResponse(success=True, scores=[MatchScore(item_id="c1", score=140), MatchScore(item_id="c2", score=-3)])
    scores = await CompatibilityScorer(RecordingProvider(response=resp)).score(BASE, CANDIDATES)
    assert scores == {"c1": 100, "c2": 0}


@pytest.mark.asyncio
async def test_non_finite_model_scores_are_unscored():
    resp = MatchResponse(
        success=True,
        scores=[MatchScore(item_id="c1", score=float("nan")), MatchScore(item_id="c2", score=float("inf"))],
    )
    result = await CompatibilityScorer(RecordingProvider(response=resp)).score_detailed(BASE, CANDIDATES)
    assert result.source == "model"
    assert result.scores == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("exc", [ScoringUnavailable("http_500"), RuntimeError("boom")])
async def test_provider_failure_falls_back_for_every_candidate(exc):
    result = await CompatibilityScorer(RecordingProvider(exc=exc)).score_detailed(BASE, CANDIDATES)
    assert result.source == "fallback"
    assert set(result.scores) == {"c1", "c2"}
    assert all(0 <= s <= 100 for s in result.scores.values())
    # black -> white is complementary, plus neutral, style and one shared tag
    assert result.scores["c1"] == 100


def _http_scorer(handler, timeout_ms=8000):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CompatibilityScorer(HttpScoringProvider("http://scoring.test/match", client=client), timeout_ms=timeout_ms)


@pytest.mark.asyncio
async def test_http_500_falls_back():
    scorer = _http_scorer(lambda request: httpx.Response(500, json={"error": "down"}))
    result = await scorer.score_detailed(BASE, CANDIDATES)
    assert result.source == "fallback"
    assert set(result.scores) == {"c1", "c2"}


@pytest.mark.asyncio
async def test_http_malformed_body_falls_back():
    scorer = _http_scorer(lambda request: httpx.Response(200, text="<html>nope</html>"))
    result = await scorer.score_detailed(BASE, CANDIDATES)
    assert result.source == "fallback"


@pytest.mark.asyncio
async def test_http_success_false_falls_back():
    scorer = _http_scorer(lambda request: httpx.Response(200, json={"success": False, "scores": []}))
    result = await scorer.score_detailed(BASE, CANDIDATES)
    assert result.source == "fallback"


@pytest.mark.asyncio
async def test_http_timeout_falls_back():
    async def slow(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"success": True, "scores": []})

    scorer = _http_scorer(slow, timeout_ms=50)
    result = await scorer.score_detailed(BASE, CANDIDATES)
    assert result.source == "fallback"


@pytest.mark.asyncio
async def test_http_body_uses_wire_names():
    seen = {}

    def handler(request: httpx.Request):
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "scores": [{"itemId": "c2", "score": 40}]})

    scores = await _http_scorer(handler).score(BASE, CANDIDATES)
    assert scores == {"c2": 40}
    assert "baseItem" in seen
    assert seen["items"][0]["id"] == "c1"
