import httpx
import pytest

from mixmatch.services import llm as llm_service
from mixmatch.services.llm.providers.base import NullProvider


@pytest.mark.asyncio
async def test_health_and_root(client: httpx.AsyncClient):
    resp = await client.get("/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    root = await client.get("/")
    assert root.json()["name"] == "Mixmatch API"


@pytest.mark.asyncio
async def test_match_endpoint_falls_back_to_rules(client: httpx.AsyncClient):
    llm_service.set_provider(NullProvider())
    payload = {
        "baseItem": {"title": "Black Tee", "category": "tops", "color": "black", "style": "casual"},
        "items": [
            {"id": "a", "title": "White Jeans", "color": "white", "style": "casual"},
            {"id": "b", "title": "Pink Skirt", "color": "pink"},
        ],
    }
    resp = await client.post("/v1/outfits/match", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["source"] == "fallback"
    assert [s["itemId"] for s in data["scores"]] == ["a", "b"]
    assert data["scores"][0]["score"] == 100


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{}, {"items": []}, {"baseItem": {"title": "Tee"}}, {"baseItem": {"title": "Tee"}, "items": "x"}],
)
async def test_match_endpoint_requires_fields(client: httpx.AsyncClient, payload):
    resp = await client.post("/v1/outfits/match", json=payload)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_match_endpoint_empty_items(client: httpx.AsyncClient):
    resp = await client.post("/v1/outfits/match", json={"baseItem": {"title": "Tee"}, "items": []})
    assert resp.status_code == 200
    assert resp.json()["scores"] == []


@pytest.mark.asyncio
async def test_suggest_with_explicit_pool(client: httpx.AsyncClient):
    body = {
        "baseItem": {"id": "b1", "category": "Dress", "title": "Red Satin Dress"},
        "pool": [
            {"id": "p1", "category": "Tops", "title": "Black Silk Blouse"},
            {"id": "p2", "category": "Pants", "title": "White Trousers"},
            {"id": "p3", "category": "Heels", "title": "Black Heels"},
            {"id": "p4", "category": "Necklace", "title": "Gold Necklace"},
        ],
    }
    resp = await client.post("/v1/outfits/suggest", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["locked_slot"] == "dresses"
    assert [i["id"] for i in data["tops"]] == ["p1"]
    assert [i["id"] for i in data["shoes"]] == ["p3"]
    assert set(data["scores"]) == {"tops", "bottoms", "shoes", "accessories"}
    assert all(0 <= v <= 100 for v in data["scores"]["bottoms"].values())
    assert data["warnings"] == []
    assert [i["id"] for i in data["fallback"]] == ["p1", "p2", "p3", "p4"]


@pytest.mark.asyncio
async def test_suggest_reads_catalog_when_pool_missing(client: httpx.AsyncClient):
    body = {"baseItem": {"id": "s1", "category": "Sneakers", "title": "White Leather Sneakers"}, "limit": 4}
    resp = await client.post("/v1/outfits/suggest", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["locked_slot"] == "shoes"
    assert [i["id"] for i in data["shoes"]] == ["s1"]
    assert len(data["tops"]) == 4
    assert [i["id"] for i in data["bottoms"]] == ["p1"]


@pytest.mark.asyncio
async def test_suggest_accepts_id_only_base(client: httpx.AsyncClient):
    resp = await client.post("/v1/outfits/suggest", json={"baseItem": {"id": "p1"}, "limit": 3})
    assert resp.status_code == 200
    data = resp.json()
    assert data["base"]["title"] == "Black Slim Jeans"
    assert data["locked_slot"] == "bottoms"
    assert [i["id"] for i in data["bottoms"]] == ["p1"]
    assert "p1" not in [i["id"] for i in data["fallback"]]
    assert data["warnings"] == []


@pytest.mark.asyncio
async def test_suggest_rejects_base_without_id(client: httpx.AsyncClient):
    resp = await client.post("/v1/outfits/suggest", json={"baseItem": {"title": "Tee"}, "pool": []})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_feed_pages_are_stable_for_a_seed(client: httpx.AsyncClient):
    first = await client.get("/v1/feed", params={"mode": "trending", "seed": 123, "page": 1, "pageSize": 20})
    second = await client.get("/v1/feed", params={"mode": "trending", "seed": 123, "page": 2, "pageSize": 20})
    whole = await client.get("/v1/feed", params={"mode": "trending", "seed": 123, "page": 1, "pageSize": 40})
    assert first.status_code == 200
    a, b, w = first.json(), second.json(), whole.json()
    assert a["total"] == 35
    assert a["hasMore"] is True and b["hasMore"] is False
    assert a["seed"] == 123 and a["mode"] == "trending" and b["page"] == 2
    assert [i["id"] for i in a["items"] + b["items"]] == [i["id"] for i in w["items"]]


@pytest.mark.asyncio
async def test_feed_normalises_seed_and_defaults(client: httpx.AsyncClient):
    resp = await client.get("/v1/feed", params={"seed": -5})
    data = resp.json()
    assert data["seed"] == 2_147_483_642
    assert data["mode"] == "trending"
    assert len(data["items"]) == 20
    unseeded = (await client.get("/v1/feed")).json()
    assert 0 <= unseeded["seed"] < 2_147_483_647


@pytest.mark.asyncio
async def test_feed_search_filters_and_sorts(client: httpx.AsyncClient):
    params = {"mode": "search", "q": "item", "maxPrice": 14, "sort": "price-desc"}
    data = (await client.get("/v1/feed", params=params)).json()
    assert [i["id"] for i in data["items"]] == ["i4", "i3", "i2", "i1", "i0"]
    assert data["hasMore"] is False


@pytest.mark.asyncio
async def test_feed_rejects_bad_params(client: httpx.AsyncClient):
    assert (await client.get("/v1/feed", params={"mode": "random"})).status_code == 422
    assert (await client.get("/v1/feed", params={"pageSize": 500})).status_code == 422


@pytest.mark.asyncio
async def test_track_promotion(client: httpx.AsyncClient, store):
    resp = await client.post("/v1/promotions/track", json={"listingId": "i0", "eventType": "view"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "tracked": True, "eventType": "view"}
    resp = await client.post("/v1/promotions/track", json={"listingId": "i1", "eventType": "click"})
    assert resp.json()["tracked"] is False
    assert store.promotion_counts("i0") == {"view": 1, "click": 0}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{"eventType": "view"}, {"listingId": "i0"}, {"listingId": "i0", "eventType": "share"}],
)
async def test_track_promotion_validates(client: httpx.AsyncClient, body):
    resp = await client.post("/v1/promotions/track", json=body)
    assert resp.status_code == 400
