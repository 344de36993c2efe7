"""Category endpoints: system categories plus the user's own."""

from typing import List

from fastapi import APIRouter, Depends, status

from totali.api.dependencies import get_category_service, get_current_active_user
from totali.core.exceptions import AppException
from totali.core.logging import get_logger
from totali.models.database.user import User
from totali.models.domain.category import CategoryCreate, CategoryResponse, CategoryWithStats
from totali.models.domain.common import ApiResponse, success_response
from totali.services.categories import CategoryService

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=ApiResponse[List[CategoryWithStats]])
async def list_categories(
    current_user: User = Depends(get_current_active_user),
    service: CategoryService = Depends(get_category_service)
):
    """System and own categories with their item counts."""
    return success_response(await service.list_categories(current_user.id))


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_category(
    payload: CategoryCreate,
    current_user: User = Depends(get_current_active_user),
    service: CategoryService = Depends(get_category_service)
):
    try:
        category = await service.create_category(current_user.id, payload)
        return success_response(category, "Category created successfully")
    except AppException:
        raise
    except Exception as e:
        logger.error("Category creation failed", error=e, user_id=current_user.id)
        raise AppException("Failed to create category")


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(
    category_id: str,
    current_user: User = Depends(get_current_active_user),
    service: CategoryService = Depends(get_category_service)
):
    """Delete one of the user's own categories once it has no items."""
    await service.delete_category(current_user.id, category_id)
    return success_response(None, "Category deleted successfully")


@router.get("/{category_id}/stats", response_model=ApiResponse[CategoryWithStats])
async def get_category_stats(
    category_id: str,
    current_user: User = Depends(get_current_active_user),
    service: CategoryService = Depends(get_category_service)
):
    return success_response(await service.get_category_stats(current_user.id, category_id))
