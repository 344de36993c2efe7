"""Item endpoints for the Totali API.

This module provides:
- Item CRUD with per-item statistics
- Paginated, searchable item listing
- Collection analytics (overview, efficiency ranking, category comparison,
  purchase trend)

Analytics routes are declared before ``/{item_id}`` so their paths are
never captured as an item id.
"""

from fastapi import APIRouter, Depends, Query, status

from totali.api.dependencies import (
    get_current_active_user,
    get_item_list_params,
    get_item_service,
)
from totali.core.exceptions import AppException
from totali.core.logging import get_logger, monitor_performance
from totali.models.database.user import User
from totali.models.domain.analytics import (
    CategoryEfficiencyComparison,
    EfficiencyAnalytics,
    ItemStatistics,
    ItemsOverview,
    TrendAnalytics,
)
from totali.models.domain.common import ApiResponse, success_response
from totali.models.domain.item import (
    ItemCreate,
    ItemListParams,
    ItemUpdate,
    ItemWithStats,
    PaginatedItems,
)
from totali.services.items import ItemService

# Initialize components
router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "",
    response_model=ApiResponse[ItemWithStats],
    status_code=status.HTTP_201_CREATED
)
async def create_item(
    payload: ItemCreate,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Create a new item for the current user."""
    try:
        item = await service.create_item(current_user.id, payload)
        return success_response(item, "Item created successfully")
    except AppException:
        raise
    except Exception as e:
        logger.error("Item creation failed", error=e, user_id=current_user.id)
        raise AppException("Failed to create item")


@router.get("", response_model=ApiResponse[PaginatedItems])
async def list_items(
    params: ItemListParams = Depends(get_item_list_params),
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """List the current user's items with pagination, search and filters."""
    return success_response(await service.list_items(current_user.id, params))


@router.get("/statistics/overview", response_model=ApiResponse[ItemsOverview])
@monitor_performance("items_overview")
async def get_overview(
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Totals, average daily cost and status counts."""
    return success_response(await service.get_overview(current_user.id))


@router.get("/analytics/efficiency", response_model=ApiResponse[EfficiencyAnalytics])
@monitor_performance("efficiency_analytics")
async def get_efficiency_analytics(
    limit: int = Query(5, ge=1, le=50),
    days: int = Query(0, ge=0, description="Purchase window in days, 0 for all time"),
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Most and least efficiently used items."""
    return success_response(await service.get_efficiency(current_user.id, limit=limit, days=days))


@router.get("/analytics/categories", response_model=ApiResponse[CategoryEfficiencyComparison])
@monitor_performance("category_analytics")
async def get_category_analytics(
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Per-category efficiency comparison."""
    return success_response(await service.get_category_comparison(current_user.id))


@router.get("/analytics/trend", response_model=ApiResponse[TrendAnalytics])
@monitor_performance("trend_analytics")
async def get_trend_analytics(
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Daily new and cumulative item counts and values."""
    return success_response(await service.get_trend(current_user.id, days=days))


@router.get("/{item_id}", response_model=ApiResponse[ItemWithStats])
async def get_item(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    return success_response(await service.get_item(current_user.id, item_id))


@router.patch("/{item_id}", response_model=ApiResponse[ItemWithStats])
async def update_item(
    item_id: str,
    payload: ItemUpdate,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Partially update an item; omitted fields are left unchanged."""
    try:
        item = await service.update_item(current_user.id, item_id, payload)
        return success_response(item, "Item updated successfully")
    except AppException:
        raise
    except Exception as e:
        logger.error("Item update failed", error=e, item_id=item_id)
        raise AppException("Failed to update item")


@router.delete("/{item_id}", response_model=ApiResponse[None])
async def delete_item(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Soft delete an item."""
    await service.delete_item(current_user.id, item_id)
    return success_response(None, "Item deleted successfully")


@router.get("/{item_id}/statistics", response_model=ApiResponse[ItemStatistics])
async def get_item_statistics(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ItemService = Depends(get_item_service)
):
    """Detail statistics for one item, including usage frequency."""
    return success_response(await service.get_item_statistics(current_user.id, item_id))
