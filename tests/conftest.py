import httpx
import pytest
from asgi_lifespan import LifespanManager

from mixmatch.catalog.providers.in_memory import InMemoryCatalogStore
from mixmatch.main import app
from mixmatch.routers import deps
from mixmatch.services import llm as llm_service
from mixmatch.services.scoring import CompatibilityScorer, NullScoringProvider
from tests.fixtures import mixed_pool, numbered_items

API_BASE = "http://test"


@pytest.fixture
def store():
    return InMemoryCatalogStore(mixed_pool() + numbered_items(30, boosted_every=5))


@pytest.fixture(autouse=True)
def override_deps(store):
    app.dependency_overrides[deps.get_catalog_store] = lambda: store
    app.dependency_overrides[deps.get_compatibility_scorer] = lambda: CompatibilityScorer(NullScoringProvider())
    yield
    app.dependency_overrides.pop(deps.get_catalog_store, None)
    app.dependency_overrides.pop(deps.get_compatibility_scorer, None)


@pytest.fixture(autouse=True)
def reset_llm_provider():
    yield
    llm_service.set_provider(None)


@pytest.fixture
async def client():
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=API_BASE) as ac:
            yield ac
