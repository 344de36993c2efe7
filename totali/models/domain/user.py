"""Pydantic models for user management.

The identity provider owns credentials; these models describe the token
subject and the local mirror row.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, UUID4

from .common import CamelModel


class AuthUser(CamelModel):
    """Authenticated principal decoded from a bearer token."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class UserSync(CamelModel):
    """Payload for mirroring an identity-provider account locally."""
    id: UUID4 = Field(..., description="Identity provider user ID")
    email: EmailStr
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)


class UserUpdate(CamelModel):
    """Profile fields the user may change."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)


class UserResponse(CamelModel):
    """Response model for user data."""
    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
