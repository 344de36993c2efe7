# totali/database/repositories/users.py
"""Repository for user-related database operations."""

from typing import Optional

from sqlalchemy import select

from totali.database.session import with_tracing
from totali.models.database.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for managing user data."""

    model = User

    @with_tracing
    async def get_by_email(self, email: str) -> Optional[User]:
        query = select(User).where(User.email == email)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
