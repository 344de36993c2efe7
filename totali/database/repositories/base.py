"""Data access layer implementation.

Base repository implementation for database operations.

This module provides a generic repository pattern implementation with common
database operations that can be inherited by specific repositories.

Features:
- Generic create / get / update / delete
- Counting and existence checks
- Shared tracing of every operation
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from totali.core.logging import get_logger
from totali.database.session import with_tracing
from totali.models.database.base import Base

# Type variable for models
ModelType = TypeVar("ModelType", bound=Base)
logger = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations."""

    model: Type[ModelType]

    def __init__(self, session: AsyncSession, model: Optional[Type[ModelType]] = None):
        """Initialize repository with session and (optionally) model.

        Args:
            session: AsyncSession instance
            model: SQLAlchemy model class, defaults to the subclass' ``model``
        """
        if model is not None:
            self.model = model
        self.session = session

    @with_tracing
    async def create(self, **kwargs) -> ModelType:
        """Create a new record and flush it so generated values are available.

        Args:
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        try:
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            return instance
        except Exception as e:
            logger.error(f"Create failed for {self.model.__name__}", error=e)
            raise

    @with_tracing
    async def get(self, id: Any) -> Optional[ModelType]:
        """Get record by ID.

        Returns:
            Model instance if found, None otherwise
        """
        query = select(self.model).where(self.model.id == id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @with_tracing
    async def update(self, instance: ModelType, **kwargs) -> ModelType:
        """Apply field values to a loaded instance and flush.

        Args:
            instance: Persistent model instance
            **kwargs: Fields to update
        """
        for field, value in kwargs.items():
            setattr(instance, field, value)
        await self.session.flush()
        return instance

    @with_tracing
    async def delete(self, instance: ModelType) -> None:
        """Hard-delete a record."""
        await self.session.delete(instance)
        await self.session.flush()

    @with_tracing
    async def exists(self, *criteria) -> bool:
        """Check if a record matching the criteria exists."""
        query = select(self.model.id).where(*criteria).limit(1)
        result = await self.session.execute(query)
        return result.first() is not None

    @with_tracing
    async def count(self, *criteria) -> int:
        """Get count of records matching criteria."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        result = await self.session.execute(query)
        return result.scalar_one()

