"""Shared test fixtures for StackFast backend."""

from collections.abc import AsyncGenerator

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Environment, Settings
from app.dependencies import get_catalog, get_redis
from app.main import create_app
from services.models import ToolProfile
from services.tool_catalog import parse_catalog


def make_tool(tool_id: str, category: str, **overrides) -> dict:
    """Catalog record scoring 60 for a {setup: 2, daily: 2} caller on a medium project."""
    record = {
        "id": tool_id,
        "name": tool_id.replace("_", " ").title(),
        "category": category,
        "skills": {"setup": 2, "daily": 2},
        "pricing_model": "free-tier",
        "baseline_cost": 0,
        "popularity_score": 1.0,
    }
    record.update(overrides)
    return record


SAMPLE_RECORDS = [
    make_tool(
        "react_app",
        "frontend",
        popularity_score=0.9,
        community_sentiment="highly_positive",
        costModel={"type": "Free", "base_cost_monthly": 0},
    ),
    make_tool(
        "node_api",
        "backend",
        baseline_cost=10,
        costModel={"type": "Subscription", "base_cost_monthly": 10},
    ),
    make_tool(
        "postgres",
        "database",
        skills={"setup": 3, "daily": 2},
        costModel={
            "type": "Subscription",
            "base_cost_monthly": 25,
            "free_tier_details": "500MB free",
        },
    ),
    make_tool(
        "mongo",
        "database",
        popularity_score=0.8,
        costModel={"type": "Pay-as-you-go", "base_cost_monthly": 0, "unit_cost": 0.1},
    ),
    make_tool(
        "gpt_api",
        "ai_ml",
        pricing_model="paid",
        baseline_cost=20,
        costModel={"type": "Pay-as-you-go", "base_cost_monthly": 10, "unit_cost": 0.01},
    ),
    make_tool("netlify", "deployment", popularity_score=0.7),
]


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment=Environment.TESTING,
        debug=True,
        redis_url="redis://localhost:6379/15",
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture
def sample_catalog() -> list[ToolProfile]:
    """Small catalog covering every cost model type."""
    return parse_catalog(SAMPLE_RECORDS)


@pytest.fixture
async def fake_redis() -> AsyncGenerator:
    """Provide a fake Redis instance for testing."""
    server = fakeredis.FakeServer()
    redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    yield redis
    await redis.aclose()


@pytest.fixture
async def app(test_settings):
    """Create a test application instance."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def api_client(app, fake_redis, sample_catalog) -> AsyncGenerator:
    """Async HTTP client with fake Redis and the sample catalog injected."""

    async def override_get_redis():
        yield fake_redis

    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_catalog] = lambda: sample_catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
