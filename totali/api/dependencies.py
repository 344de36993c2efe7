"""Dependencies for FastAPI application.

This module defines dependencies used across API endpoints including:
- Database session management
- Service instances
- Authentication checks
- Common query parameters
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

# Internal imports
from totali.core.security import SecurityService, bearer_scheme
from totali.database.session import get_session
from totali.models.database.item import ItemStatus
from totali.models.database.user import User
from totali.models.domain.common import SortOrder
from totali.models.domain.item import ItemListParams, ItemSortBy
from totali.models.domain.user import AuthUser
from totali.services.categories import CategoryService
from totali.services.items import ItemService
from totali.services.pricing_cache import PricingCache
from totali.services.users import UserService


# Database Dependencies
async def get_db(
    session: AsyncSession = Depends(get_session)
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database session."""
    yield session


# Cache Dependencies
def get_pricing_cache(request: Request) -> PricingCache:
    """Pricing cache created by the application lifespan."""
    return request.app.state.pricing_cache


# Service Dependencies
def get_security_service(request: Request) -> SecurityService:
    """Token verifier configured from the application settings."""
    return SecurityService(request.app.state.settings.SUPABASE)


def get_item_service(db: AsyncSession = Depends(get_db)) -> ItemService:
    return ItemService(db)


def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


# User Dependencies
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    security: SecurityService = Depends(get_security_service)
) -> AuthUser:
    """Principal named by the bearer token."""
    return security.verify_token(credentials.credentials if credentials else None)


async def get_current_active_user(
    principal: AuthUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service)
) -> User:
    """Local user row for the principal, provisioned on first request."""
    return await users.ensure_user(principal)


# Common Query Parameters
def get_item_list_params(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    status: Optional[ItemStatus] = Query(None),
    sort_by: ItemSortBy = Query(ItemSortBy.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
) -> ItemListParams:
    """Item list query: pagination, search, filters and ordering."""
    return ItemListParams(
        page=page,
        limit=limit,
        search=search.strip() if search and search.strip() else None,
        category_id=category_id,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
