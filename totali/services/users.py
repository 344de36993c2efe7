"""User mirror service.

Accounts live with the identity provider; this service keeps the local row
that items and categories hang off.
"""

from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from totali.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from totali.core.logging import get_logger
from totali.database.repositories.users import UserRepository
from totali.models.database.user import User
from totali.models.domain.user import AuthUser, UserSync, UserUpdate

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def sync_user(self, principal: AuthUser, payload: UserSync) -> Tuple[User, bool]:
        """Create the local row for the token's subject.

        Returns the row and whether it was created. Existing rows are
        returned unchanged.
        """
        if str(payload.id) != principal.id:
            raise ForbiddenError("Cannot sync a different user")

        user = await self.users.get(principal.id)
        if user is not None:
            return user, False

        if await self.users.get_by_email(payload.email) is not None:
            raise BadRequestError("Email already registered to another account")

        user = await self.users.create(
            id=principal.id,
            email=payload.email,
            name=payload.name,
            avatar_url=payload.avatar_url,
        )
        await self.session.commit()
        logger.info("User synced", user_id=user.id)
        return user, True

    async def ensure_user(self, principal: AuthUser) -> User:
        """Get the local row for a principal, creating it on first sight."""
        user = await self.users.get(principal.id)
        if user is not None:
            return user

        email = principal.email
        if email and await self.users.get_by_email(email) is not None:
            logger.warning("Token email already registered, provisioning without it", user_id=principal.id)
            email = None

        user = await self.users.create(
            id=principal.id,
            email=email or f"{principal.id}@users.totali.app",
            name=principal.name,
            avatar_url=principal.avatar_url,
        )
        await self.session.commit()
        logger.info("User provisioned from token", user_id=user.id)
        return user

    async def get_user(self, user_id: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_user(self, user_id: str, payload: UserUpdate) -> User:
        user = await self.get_user(user_id)
        await self.users.update(user, **payload.model_dump(exclude_unset=True, exclude_none=True))
        await self.session.commit()
        return user
