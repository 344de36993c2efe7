"""Shared pytest fixtures and configurations for the Totali application.

This module provides test fixtures and configurations used across all test files,
including:
- Settings pointing at a throwaway SQLite database
- Test client setup (the lifespan creates the schema and system categories)
- Authentication fixtures
- Test data helpers
"""

from datetime import date, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from totali.core.config import (
    DatabaseSettings,
    FeatureFlags,
    RedisSettings,
    Settings,
    SupabaseSettings,
)
from totali.core.security import create_access_token
from totali.main import create_application

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
TEST_USER_ID = "8b7f1d3e-2c4a-4e6b-9f1a-0d2c3b4a5e6f"
OTHER_USER_ID = "1f2e3d4c-5b6a-4978-8a9b-0c1d2e3f4a5b"


# Settings fixtures
@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for an isolated app: temp SQLite file, no Redis."""
    return Settings(
        LOG_JSON=False,
        FEATURES=FeatureFlags(ENABLE_PRICING_CACHE=True, SEED_SYSTEM_CATEGORIES=True),
        DB=DatabaseSettings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
        SUPABASE=SupabaseSettings(SUPABASE_JWT_SECRET=TEST_JWT_SECRET),
        REDIS=RedisSettings(REDIS_HOST=None),
    )


# FastAPI test client
@pytest.fixture
def app(settings: Settings):
    return create_application(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Get test client; entering it runs the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client


# Authentication fixtures
def make_token(settings: Settings, user_id: str = TEST_USER_ID, **kwargs) -> str:
    return create_access_token(user_id, settings=settings.SUPABASE, **kwargs)


@pytest.fixture
def test_user_token(settings: Settings) -> str:
    """Create authentication token for test user."""
    return make_token(
        settings,
        email="tester@example.com",
        user_metadata={"name": "Test User", "avatar_url": "https://example.com/a.png"},
    )


@pytest.fixture
def auth_headers(test_user_token: str) -> dict:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {test_user_token}"}


@pytest.fixture
def other_auth_headers(settings: Settings) -> dict:
    """Headers for a second, unrelated user."""
    return {"Authorization": f"Bearer {make_token(settings, OTHER_USER_ID, email='other@example.com')}"}


# Test data fixtures
def days_ago(days: int) -> str:
    return (date.today() - timedelta(days=days)).isoformat()


@pytest.fixture
def create_item(client: TestClient, auth_headers: dict):
    """Factory posting an item and returning its serialized data."""
    def _create(**fields):
        payload = {
            "name": "Laptop",
            "purchasePrice": 1000,
            "purchaseDate": days_ago(100),
        }
        payload.update(fields)
        response = client.post("/api/v1/items", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_category(client: TestClient, auth_headers: dict):
    def _create(name: str = "Cameras", icon: str = "camera"):
        response = client.post(
            "/api/v1/categories",
            json={"name": name, "icon": icon},
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
