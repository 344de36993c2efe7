"""Item service: CRUD over a user's items and the analytics built on them.

Reads only ever see the user's non-deleted items. Analytics load one
snapshot of those items per request and hand it to
``totali.services.analytics``.
"""

import math
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from totali.core.exceptions import BadRequestError, NotFoundError
from totali.core.logging import get_logger
from totali.database.repositories.categories import CategoryRepository
from totali.database.repositories.items import ItemRepository, UsageRecordRepository
from totali.models.database.item import Item, UsageRecord
from totali.models.domain.analytics import (
    CategoryEfficiencyComparison,
    EfficiencyAnalytics,
    ItemStatistics,
    ItemsOverview,
    TrendAnalytics,
)
from totali.models.domain.item import (
    ItemCreate,
    ItemListParams,
    ItemResponse,
    ItemSnapshot,
    ItemUpdate,
    ItemWithStats,
    PaginatedItems,
    UsageRecordCreate,
)
from totali.services import analytics

logger = get_logger(__name__)

ITEM_NOT_FOUND = "Item not found or deleted"
CATEGORY_NOT_ACCESSIBLE = "Category not found or not accessible"

# Columns that may not be cleared by a partial update
_REQUIRED_FIELDS = {"name", "purchase_price", "purchase_date", "status"}


def with_stats(item: Item, today: Optional[date] = None) -> ItemWithStats:
    """Serialize an item together with its per-item statistics."""
    stats = analytics.item_stats(ItemSnapshot.model_validate(item), today)
    return ItemWithStats(
        **ItemResponse.model_validate(item).model_dump(),
        **stats.model_dump(),
    )


class ItemService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.items = ItemRepository(session)
        self.categories = CategoryRepository(session)
        self.usage_records = UsageRecordRepository(session)

    async def _check_category(self, user_id: str, category_id: Optional[str]) -> None:
        if category_id is not None and await self.categories.get_visible(category_id, user_id) is None:
            raise BadRequestError(CATEGORY_NOT_ACCESSIBLE)

    async def get_owned_item(self, user_id: str, item_id: str) -> Item:
        item = await self.items.get_for_user(item_id, user_id)
        if item is None:
            raise NotFoundError(ITEM_NOT_FOUND)
        return item

    async def snapshots(self, user_id: str) -> List[ItemSnapshot]:
        """Snapshot of all the user's non-deleted items for aggregation."""
        items = await self.items.list_active(user_id)
        return [ItemSnapshot.model_validate(item) for item in items]

    async def create_item(self, user_id: str, payload: ItemCreate) -> ItemWithStats:
        await self._check_category(user_id, payload.category_id)

        data = payload.model_dump()
        if data.get("image_url") is not None:
            data["image_url"] = str(data["image_url"])

        item = await self.items.create(user_id=user_id, **data)
        await self.session.commit()
        logger.info("Item created", user_id=user_id, item_id=item.id)

        return with_stats(await self.get_owned_item(user_id, item.id))

    async def list_items(self, user_id: str, params: ItemListParams) -> PaginatedItems:
        items, total = await self.items.search(user_id, params)
        return PaginatedItems(
            items=[with_stats(item) for item in items],
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=math.ceil(total / params.limit) if total else 0,
        )

    async def get_item(self, user_id: str, item_id: str) -> ItemWithStats:
        return with_stats(await self.get_owned_item(user_id, item_id))

    async def update_item(self, user_id: str, item_id: str, payload: ItemUpdate) -> ItemWithStats:
        """Apply the fields present in the payload.

        A category change is checked for visibility; explicit nulls on
        required columns are ignored.
        """
        item = await self.get_owned_item(user_id, item_id)

        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if not (field in _REQUIRED_FIELDS and value is None)
        }
        if changes.get("category_id") is not None and changes["category_id"] != item.category_id:
            await self._check_category(user_id, changes["category_id"])
        if changes.get("image_url") is not None:
            changes["image_url"] = str(changes["image_url"])

        await self.items.update(item, **changes)
        await self.session.commit()
        logger.info("Item updated", user_id=user_id, item_id=item_id, fields=sorted(changes))

        return with_stats(await self.get_owned_item(user_id, item_id))

    async def delete_item(self, user_id: str, item_id: str) -> None:
        """Soft delete: the row stays but drops out of every view."""
        item = await self.get_owned_item(user_id, item_id)
        item.soft_delete()
        await self.session.commit()
        logger.info("Item deleted", user_id=user_id, item_id=item_id)

    async def get_item_statistics(self, user_id: str, item_id: str) -> ItemStatistics:
        item = await self.get_owned_item(user_id, item_id)
        record_count = await self.usage_records.count_for_item(item.id)
        return analytics.item_statistics(ItemSnapshot.model_validate(item), record_count)

    async def get_overview(self, user_id: str) -> ItemsOverview:
        return analytics.overview(await self.snapshots(user_id))

    async def get_efficiency(
        self,
        user_id: str,
        limit: int = analytics.DEFAULT_RANKING_LIMIT,
        days: int = 0
    ) -> EfficiencyAnalytics:
        return analytics.efficiency_ranking(await self.snapshots(user_id), limit=limit, days=days)

    async def get_category_comparison(self, user_id: str) -> CategoryEfficiencyComparison:
        return analytics.category_comparison(await self.snapshots(user_id))

    async def get_trend(self, user_id: str, days: int = analytics.DEFAULT_TREND_DAYS) -> TrendAnalytics:
        return analytics.trend(await self.snapshots(user_id), days=days)

    # Usage records

    async def list_usage_records(self, user_id: str, item_id: str) -> List[UsageRecord]:
        item = await self.get_owned_item(user_id, item_id)
        return await self.usage_records.list_for_item(item.id)

    async def record_usage(
        self,
        user_id: str,
        item_id: str,
        payload: UsageRecordCreate
    ) -> UsageRecord:
        item = await self.get_owned_item(user_id, item_id)
        if await self.usage_records.exists(
            UsageRecord.item_id == item.id,
            UsageRecord.usage_date == payload.usage_date,
        ):
            raise BadRequestError(f"Usage already recorded for {payload.usage_date.isoformat()}")

        record = await self.usage_records.create(item_id=item.id, **payload.model_dump())
        await self.session.commit()
        return record

    async def delete_usage_record(self, user_id: str, item_id: str, record_id: str) -> None:
        item = await self.get_owned_item(user_id, item_id)
        record = await self.usage_records.get_for_item(record_id, item.id)
        if record is None:
            raise NotFoundError("Usage record not found")
        await self.usage_records.delete(record)
        await self.session.commit()
