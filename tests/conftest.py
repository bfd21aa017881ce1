"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment before any app code runs
os.environ["ENV"] = "test"
for _key in ("REDIS_URL", "OPENROUTER_API_KEY", "OPENAI_API_KEY"):
    os.environ.pop(_key, None)

from tests.fixtures import ARTICLE_HTML  # noqa: E402
from tests.fixtures.http import Pages, make_extractor  # noqa: E402


@pytest.fixture
def pages() -> Pages:
    """Pages served by the mock transport; tests may add entries."""
    return {"https://www.example.com/water-heaters": (200, ARTICLE_HTML)}


@pytest.fixture
def result_store():
    from worker.storage.results import InMemoryResultStore

    return InMemoryResultStore()


@pytest.fixture
def mock_provider():
    """Generation provider with no scripted output; tests set ``responses``."""
    from worker.generation.providers import MockProvider

    return MockProvider(responses=[])


@pytest.fixture
async def client(pages, result_store, mock_provider) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with in-process collaborators."""
    from api.config import get_settings

    get_settings.cache_clear()  # Use test env, not stale or .env values

    from api.deps import (
        get_audit_engine,
        get_fact_checker,
        get_generation_provider,
        get_result_store,
    )
    from api.main import app
    from worker.tasks.audit import AuditEngine

    app.dependency_overrides[get_result_store] = lambda: result_store
    app.dependency_overrides[get_generation_provider] = lambda: mock_provider
    app.dependency_overrides[get_fact_checker] = lambda: None
    app.dependency_overrides[get_audit_engine] = lambda: AuditEngine(make_extractor(pages))

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
