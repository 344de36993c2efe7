"""Pricing-lookup cache endpoints backed by Redis."""

from fastapi import APIRouter, Depends, Response

from totali.api.dependencies import get_current_user, get_pricing_cache
from totali.core.exceptions import NotFoundError, ServiceUnavailableError
from totali.core.logging import get_logger
from totali.models.domain.common import ApiResponse, success_response
from totali.models.domain.pricing import PricingEstimate, PricingEstimateIn
from totali.models.domain.user import AuthUser
from totali.services.pricing_cache import PricingCache

router = APIRouter()
logger = get_logger(__name__)


def require_cache(cache: PricingCache = Depends(get_pricing_cache)) -> PricingCache:
    if not cache.enabled:
        raise ServiceUnavailableError("Pricing cache is not configured")
    return cache


@router.get("/{item_name}", response_model=ApiResponse[PricingEstimate])
async def get_pricing(
    item_name: str,
    principal: AuthUser = Depends(get_current_user),
    cache: PricingCache = Depends(require_cache)
):
    """Cached pricing estimate for an item name."""
    estimate = await cache.get_cached_pricing(item_name)
    if estimate is None:
        raise NotFoundError(f'No cached pricing for "{item_name}"')
    return success_response(estimate)


@router.head("/{item_name}")
async def head_pricing(
    item_name: str,
    principal: AuthUser = Depends(get_current_user),
    cache: PricingCache = Depends(require_cache)
):
    """200 when an estimate is cached for the name, 404 otherwise."""
    if not await cache.has_cached_pricing(item_name):
        raise NotFoundError(f'No cached pricing for "{item_name}"')
    return Response(status_code=200)


@router.put("/{item_name}", response_model=ApiResponse[PricingEstimate])
async def put_pricing(
    item_name: str,
    payload: PricingEstimateIn,
    principal: AuthUser = Depends(get_current_user),
    cache: PricingCache = Depends(require_cache)
):
    estimate = PricingEstimate(item_name=item_name, **payload.model_dump())
    if not await cache.cache_pricing(estimate):
        raise ServiceUnavailableError("Failed to cache pricing")
    logger.info("Pricing cached", item_name=item_name, user_id=principal.id)
    return success_response(estimate, "Pricing cached")


@router.delete("/{item_name}", response_model=ApiResponse[None])
async def delete_pricing(
    item_name: str,
    principal: AuthUser = Depends(get_current_user),
    cache: PricingCache = Depends(require_cache)
):
    await cache.clear_pricing(item_name)
    return success_response(None, "Pricing cache cleared")
