# totali/database/repositories/items.py
"""Repository for item-related database operations.

Every read here goes through ``active()``, so soft-deleted items never reach
callers.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from totali.database.session import with_tracing
from totali.models.database.item import Item, UsageRecord
from totali.models.domain.common import SortOrder
from totali.models.domain.item import ItemListParams, ItemSortBy
from .base import BaseRepository

SORT_COLUMNS = {
    ItemSortBy.PURCHASE_PRICE: Item.purchase_price,
    ItemSortBy.PURCHASE_DATE: Item.purchase_date,
    ItemSortBy.CREATED_AT: Item.created_at,
}


class ItemRepository(BaseRepository[Item]):
    """Repository for managing item data."""

    model = Item

    def active(self, user_id: str):
        """Base query over a user's non-deleted items with categories loaded."""
        return (
            select(Item)
            .options(selectinload(Item.category))
            .where(Item.user_id == user_id, Item.not_deleted())
        )

    @with_tracing
    async def list_active(self, user_id: str) -> List[Item]:
        """All non-deleted items of a user, oldest purchase first."""
        query = self.active(user_id).order_by(Item.purchase_date.asc(), Item.created_at.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @with_tracing
    async def get_for_user(self, item_id: str, user_id: str) -> Optional[Item]:
        query = self.active(user_id).where(Item.id == item_id).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @with_tracing
    async def search(self, user_id: str, params: ItemListParams) -> Tuple[List[Item], int]:
        """Page of items matching the list filters, plus the total match count."""
        conditions = [Item.user_id == user_id, Item.not_deleted()]
        if params.search:
            conditions.append(Item.name.ilike(f"%{params.search}%"))
        if params.category_id:
            conditions.append(Item.category_id == params.category_id)
        if params.status:
            conditions.append(Item.status == params.status)

        column = SORT_COLUMNS[params.sort_by]
        ordering = column.asc() if params.sort_order == SortOrder.ASC else column.desc()

        query = (
            select(Item)
            .options(selectinload(Item.category))
            .where(*conditions)
            .order_by(ordering, Item.id)
            .offset((params.page - 1) * params.limit)
            .limit(params.limit)
        )
        items = (await self.session.execute(query)).scalars().all()

        total = (await self.session.execute(
            select(func.count(Item.id)).where(*conditions)
        )).scalar_one()

        return list(items), total


class UsageRecordRepository(BaseRepository[UsageRecord]):
    """Repository for item usage records."""

    model = UsageRecord

    @with_tracing
    async def list_for_item(self, item_id: str) -> List[UsageRecord]:
        query = (
            select(UsageRecord)
            .where(UsageRecord.item_id == item_id)
            .order_by(UsageRecord.usage_date.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @with_tracing
    async def get_for_item(self, record_id: str, item_id: str) -> Optional[UsageRecord]:
        query = select(UsageRecord).where(
            UsageRecord.id == record_id,
            UsageRecord.item_id == item_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def count_for_item(self, item_id: str) -> int:
        return await self.count(UsageRecord.item_id == item_id)
