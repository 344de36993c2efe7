"""Authentication endpoints.

Sign-in happens at the identity provider; these routes only confirm a token
and mirror the account locally.
"""

from fastapi import APIRouter, Depends

from totali.api.dependencies import get_current_user, get_user_service
from totali.core.logging import get_logger
from totali.models.domain.common import ApiResponse, success_response
from totali.models.domain.user import AuthUser, UserResponse, UserSync
from totali.services.users import UserService

router = APIRouter()
logger = get_logger(__name__)


@router.post("/sync-user", response_model=ApiResponse[UserResponse])
async def sync_user(
    payload: UserSync,
    principal: AuthUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Create the local user row for the token's subject, if missing."""
    user, created = await service.sync_user(principal, payload)
    message = "User created successfully" if created else "User already exists"
    return success_response(UserResponse.model_validate(user), message)


@router.get("/test", response_model=ApiResponse[AuthUser])
async def test_token(principal: AuthUser = Depends(get_current_user)):
    """Echo the principal of a valid token."""
    return success_response(principal, "Token is valid")
