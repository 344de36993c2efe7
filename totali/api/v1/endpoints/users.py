"""User profile endpoints for the Totali API."""

from fastapi import APIRouter, Depends

from totali.api.dependencies import get_current_active_user, get_user_service
from totali.core.exceptions import AppException
from totali.core.logging import get_logger
from totali.models.database.user import User
from totali.models.domain.common import ApiResponse, success_response
from totali.models.domain.user import UserResponse, UserUpdate
from totali.services.users import UserService

# Initialize components
router = APIRouter()
logger = get_logger(__name__)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_current_user_profile(
    current_user: User = Depends(get_current_active_user)
):
    """Get current user's profile information."""
    return success_response(UserResponse.model_validate(current_user))


@router.put("/me", response_model=ApiResponse[UserResponse])
async def update_current_user_profile(
    payload: UserUpdate,
    current_user: User = Depends(get_current_active_user),
    service: UserService = Depends(get_user_service)
):
    """Update name and avatar of the current user."""
    try:
        user = await service.update_user(current_user.id, payload)
        return success_response(UserResponse.model_validate(user), "Profile updated successfully")
    except AppException:
        raise
    except Exception as e:
        logger.error("Profile update failed", error=e, user_id=current_user.id)
        raise AppException("Failed to update profile")
