# totali/database/repositories/categories.py
"""Repository for category-related database operations."""

from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_, select

from totali.database.session import with_tracing
from totali.models.database.category import Category
from totali.models.database.item import Item
from .base import BaseRepository


def visible_to(user_id: str):
    """System categories plus the user's own."""
    return or_(
        Category.is_system.is_(True),
        and_(Category.user_id == user_id, Category.is_system.is_(False)),
    )


class CategoryRepository(BaseRepository[Category]):
    """Repository for managing categories."""

    model = Category

    def _with_item_counts(self, user_id: str):
        active_items = (
            select(Item.category_id, func.count(Item.id).label('item_count'))
            .where(Item.user_id == user_id, Item.not_deleted())
            .group_by(Item.category_id)
            .subquery()
        )
        query = (
            select(Category, func.coalesce(active_items.c.item_count, 0))
            .outerjoin(active_items, active_items.c.category_id == Category.id)
        )
        return query

    @with_tracing
    async def list_visible(self, user_id: str) -> List[Tuple[Category, int]]:
        """Categories visible to a user with counts of the user's non-deleted items.

        System categories come first, then by creation time.
        """
        query = (
            self._with_item_counts(user_id)
            .where(visible_to(user_id))
            .order_by(Category.is_system.desc(), Category.created_at.asc())
        )
        result = await self.session.execute(query)
        return [(category, count) for category, count in result.all()]

    @with_tracing
    async def get_visible(self, category_id: str, user_id: str) -> Optional[Category]:
        query = select(Category).where(Category.id == category_id, visible_to(user_id))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @with_tracing
    async def get_visible_with_count(
        self,
        category_id: str,
        user_id: str
    ) -> Optional[Tuple[Category, int]]:
        query = self._with_item_counts(user_id).where(
            Category.id == category_id,
            visible_to(user_id),
        )
        result = await self.session.execute(query)
        row = result.first()
        return (row[0], row[1]) if row else None

    @with_tracing
    async def get_by_name(self, user_id: Optional[str], name: str) -> Optional[Category]:
        owner = Category.user_id.is_(None) if user_id is None else Category.user_id == user_id
        query = select(Category).where(owner, Category.name == name)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @with_tracing
    async def count_active_items(self, category_id: str) -> int:
        query = (
            select(func.count(Item.id))
            .where(Item.category_id == category_id, Item.not_deleted())
        )
        result = await self.session.execute(query)
        return result.scalar_one()
