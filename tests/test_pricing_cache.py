"""Tests for the Redis pricing cache and its API routes."""

import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from totali.api.dependencies import get_pricing_cache
from totali.core.config import RedisSettings, Settings
from totali.models.domain.pricing import PricingEstimate
from totali.services.pricing_cache import PricingCache


@pytest.fixture
def redis_client(mocker):
    client = mocker.AsyncMock()
    client.exists.return_value = 1
    return client


@pytest.fixture
def cache(redis_client) -> PricingCache:
    return PricingCache(client=redis_client, key_prefix="totali:", ttl_seconds=3600)


def make_estimate(**overrides) -> PricingEstimate:
    fields = {"item_name": "Laptop", "estimated_price": 899.0, "confidence": 0.8, "source": "market"}
    fields.update(overrides)
    return PricingEstimate(**fields)


class TestPricingCache:
    async def test_cache_pricing(self, cache, redis_client):
        assert await cache.cache_pricing(make_estimate()) is True

        key, ttl, value = redis_client.setex.call_args.args
        assert key == "totali:ai_pricing:Laptop"
        assert ttl == 3600
        assert json.loads(value)["estimatedPrice"] == 899.0

    async def test_custom_ttl(self, cache, redis_client):
        await cache.cache_pricing(make_estimate(), ttl_seconds=60)

        assert redis_client.setex.call_args.args[1] == 60

    async def test_get_cached_pricing(self, cache, redis_client):
        redis_client.get.return_value = make_estimate().model_dump_json(by_alias=True)

        estimate = await cache.get_cached_pricing("Laptop")

        redis_client.get.assert_awaited_once_with("totali:ai_pricing:Laptop")
        assert estimate.estimated_price == 899.0
        assert estimate.source == "market"

    async def test_miss(self, cache, redis_client):
        redis_client.get.return_value = None

        assert await cache.get_cached_pricing("Unknown") is None

    async def test_errors_degrade_to_miss(self, cache, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")
        redis_client.setex.side_effect = RedisConnectionError("down")
        redis_client.exists.side_effect = RedisConnectionError("down")
        redis_client.delete.side_effect = RedisConnectionError("down")

        assert await cache.get_cached_pricing("Laptop") is None
        assert await cache.cache_pricing(make_estimate()) is False
        assert await cache.has_cached_pricing("Laptop") is False
        await cache.clear_pricing("Laptop")

    async def test_corrupt_entry_is_a_miss(self, cache, redis_client):
        redis_client.get.return_value = "{not json"

        assert await cache.get_cached_pricing("Laptop") is None

    async def test_has_and_clear(self, cache, redis_client):
        assert await cache.has_cached_pricing("Laptop") is True

        await cache.clear_pricing("Laptop")

        redis_client.delete.assert_awaited_once_with("totali:ai_pricing:Laptop")

    async def test_status(self, cache, redis_client):
        assert await cache.status() == "connected"

        redis_client.ping.side_effect = RedisConnectionError("down")
        assert await cache.status() == "unavailable"

    async def test_disabled_cache(self):
        cache = PricingCache()

        assert cache.enabled is False
        assert await cache.cache_pricing(make_estimate()) is False
        assert await cache.get_cached_pricing("Laptop") is None
        assert await cache.has_cached_pricing("Laptop") is False
        assert await cache.status() == "disabled"
        await cache.close()

    def test_from_settings_without_redis(self):
        cache = PricingCache.from_settings(Settings(REDIS=RedisSettings(REDIS_HOST=None)))

        assert cache.enabled is False

    async def test_from_settings_with_redis(self):
        settings = Settings(REDIS=RedisSettings(REDIS_HOST="redis.internal", REDIS_KEY_PREFIX="t:", REDIS_TTL_SECONDS=10))

        cache = PricingCache.from_settings(settings)

        assert cache.enabled is True
        assert cache.key("Desk") == "t:ai_pricing:Desk"
        assert cache.ttl_seconds == 10
        await cache.close()


class TestPricingApi:
    def test_disabled_cache_answers_503(self, client, auth_headers):
        response = client.get("/api/v1/pricing/Laptop", headers=auth_headers)

        assert response.status_code == 503
        assert response.json()["error"] == "Pricing cache is not configured"

    def test_requires_token(self, client):
        assert client.get("/api/v1/pricing/Laptop").status_code == 401

    def test_put_get_delete(self, app, client, auth_headers, cache, redis_client):
        app.dependency_overrides[get_pricing_cache] = lambda: cache

        put = client.put(
            "/api/v1/pricing/Laptop",
            json={"estimatedPrice": 899, "confidence": 0.8, "source": "market"},
            headers=auth_headers,
        )
        assert put.status_code == 200
        assert put.json()["data"]["itemName"] == "Laptop"

        redis_client.get.return_value = redis_client.setex.call_args.args[2]
        get = client.get("/api/v1/pricing/Laptop", headers=auth_headers)
        assert get.json()["data"]["estimatedPrice"] == 899

        delete = client.delete("/api/v1/pricing/Laptop", headers=auth_headers)
        assert delete.status_code == 200
        redis_client.delete.assert_awaited_once_with("totali:ai_pricing:Laptop")

    def test_get_miss_is_404(self, app, client, auth_headers, cache, redis_client):
        app.dependency_overrides[get_pricing_cache] = lambda: cache
        redis_client.get.return_value = None

        response = client.get("/api/v1/pricing/Unknown", headers=auth_headers)

        assert response.status_code == 404

    def test_head_reports_cached_entry(self, app, client, auth_headers, cache, redis_client):
        app.dependency_overrides[get_pricing_cache] = lambda: cache

        response = client.head("/api/v1/pricing/Laptop", headers=auth_headers)

        assert response.status_code == 200
        redis_client.exists.assert_awaited_once_with("totali:ai_pricing:Laptop")

    def test_head_miss_is_404(self, app, client, auth_headers, cache, redis_client):
        app.dependency_overrides[get_pricing_cache] = lambda: cache
        redis_client.exists.return_value = 0

        assert client.head("/api/v1/pricing/Unknown", headers=auth_headers).status_code == 404

    def test_invalid_estimate(self, app, client, auth_headers, cache):
        app.dependency_overrides[get_pricing_cache] = lambda: cache

        response = client.put(
            "/api/v1/pricing/Laptop",
            json={"estimatedPrice": 10, "confidence": 1.5, "source": "market"},
            headers=auth_headers,
        )

        assert response.status_code == 422
