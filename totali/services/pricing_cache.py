"""Redis-backed cache for item pricing lookups.

Estimates are stored as JSON under ``<prefix>ai_pricing:<item name>`` with a
TTL. Redis failures are logged and treated as cache misses so a broken cache
never fails the request that consulted it.
"""

from typing import Optional

from redis import asyncio as aioredis

from totali.core.config import Settings, get_settings
from totali.core.logging import get_logger
from totali.models.domain.pricing import PricingEstimate

logger = get_logger(__name__)


class PricingCache:
    """Pricing estimate cache; disabled when no Redis client is configured."""

    def __init__(
        self,
        client: Optional[aioredis.Redis] = None,
        key_prefix: str = "totali:",
        ttl_seconds: int = 3600
    ):
        self.client = client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PricingCache":
        settings = settings or get_settings()
        redis_settings = settings.REDIS

        client = None
        if settings.FEATURES.ENABLE_PRICING_CACHE and redis_settings.enabled:
            client = aioredis.Redis(
                host=redis_settings.REDIS_HOST,
                port=redis_settings.REDIS_PORT,
                password=redis_settings.REDIS_PASSWORD,
                db=redis_settings.REDIS_DB,
                decode_responses=True,
            )
            logger.info(
                "Pricing cache configured",
                host=redis_settings.REDIS_HOST,
                port=redis_settings.REDIS_PORT
            )
        else:
            logger.warning("Redis configuration not found, pricing cache disabled")

        return cls(
            client=client,
            key_prefix=redis_settings.REDIS_KEY_PREFIX,
            ttl_seconds=redis_settings.REDIS_TTL_SECONDS,
        )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def key(self, item_name: str) -> str:
        return f"{self.key_prefix}ai_pricing:{item_name}"

    async def cache_pricing(
        self,
        estimate: PricingEstimate,
        ttl_seconds: Optional[int] = None
    ) -> bool:
        """Store an estimate; returns False when it could not be written."""
        if not self.enabled:
            return False

        try:
            await self.client.setex(
                self.key(estimate.item_name),
                ttl_seconds or self.ttl_seconds,
                estimate.model_dump_json(by_alias=True),
            )
            return True
        except Exception as e:
            logger.error("Failed to cache pricing", error=e, item_name=estimate.item_name)
            return False

    async def get_cached_pricing(self, item_name: str) -> Optional[PricingEstimate]:
        if not self.enabled:
            return None

        try:
            cached = await self.client.get(self.key(item_name))
            if not cached:
                return None
            return PricingEstimate.model_validate_json(cached)
        except Exception as e:
            logger.error("Failed to get cached pricing", error=e, item_name=item_name)
            return None

    async def has_cached_pricing(self, item_name: str) -> bool:
        if not self.enabled:
            return False

        try:
            return await self.client.exists(self.key(item_name)) == 1
        except Exception as e:
            logger.error("Failed to check cached pricing", error=e, item_name=item_name)
            return False

    async def clear_pricing(self, item_name: str) -> None:
        if not self.enabled:
            return

        try:
            await self.client.delete(self.key(item_name))
        except Exception as e:
            logger.error("Failed to clear pricing cache", error=e, item_name=item_name)

    async def status(self) -> str:
        """Health status for the /health endpoint."""
        if not self.enabled:
            return "disabled"
        try:
            await self.client.ping()
            return "connected"
        except Exception as e:
            logger.error("Pricing cache ping failed", error=e)
            return "unavailable"

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
