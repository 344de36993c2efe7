"""Router configuration for the Totali API.

This module combines the endpoint routers into the versioned API.
"""

from fastapi import APIRouter

# Import endpoint routers
from totali.api.v1.endpoints import (
    auth,
    categories,
    items,
    pricing,
    usage_records,
    users,
)

# Create main router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(
    usage_records.router,
    prefix="/items/{item_id}/usage-records",
    tags=["usage-records"]
)
api_router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
