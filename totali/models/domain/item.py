# totali/models/domain/item.py
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field, HttpUrl, field_validator

from totali.models.database.item import ItemStatus
from .category import CategoryResponse
from .common import CamelModel, SortOrder


def _blank_to_none(value):
    """An empty or whitespace-only id means no category."""
    if isinstance(value, str) and not value.strip():
        return None
    return value

class ItemSortBy(str, Enum):
    PURCHASE_PRICE = "purchasePrice"
    PURCHASE_DATE = "purchaseDate"
    CREATED_AT = "createdAt"


class ItemBase(CamelModel):
    """Fields shared by create payloads."""
    name: str = Field(..., min_length=1, max_length=100)
    category_id: Optional[str] = None
    purchase_price: Decimal = Field(..., ge=0, decimal_places=2)
    purchase_date: date
    expected_lifetime: Optional[int] = Field(None, ge=1, description="Expected life in days")
    notes: Optional[str] = Field(None, max_length=500)
    image_url: Optional[HttpUrl] = None

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

    @field_validator('category_id', mode='before')
    @classmethod
    def blank_category_is_none(cls, v):
        return _blank_to_none(v)


class ItemCreate(ItemBase):
    """Schema for creating a new item."""


class ItemUpdate(CamelModel):
    """Schema for a partial item update; only fields that were sent are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category_id: Optional[str] = None
    purchase_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    purchase_date: Optional[date] = None
    expected_lifetime: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = Field(None, max_length=500)
    image_url: Optional[HttpUrl] = None
    status: Optional[ItemStatus] = None
    sale_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    sale_date: Optional[date] = None

    @field_validator('category_id', mode='before')
    @classmethod
    def blank_category_is_none(cls, v):
        return _blank_to_none(v)


class CategorySnapshot(CamelModel):
    id: str
    name: str
    icon: Optional[str] = None


class ItemSnapshot(CamelModel):
    """Read-only view of an item as consumed by the analytics aggregator."""
    id: str
    category_id: Optional[str] = None
    name: str
    purchase_price: float
    purchase_date: date
    expected_lifetime: Optional[int] = None
    status: ItemStatus = ItemStatus.ACTIVE
    sale_price: Optional[float] = None
    sale_date: Optional[date] = None
    category: Optional[CategorySnapshot] = None


class ItemResponse(CamelModel):
    """Schema for basic item response."""
    id: str
    user_id: str
    category_id: Optional[str] = None
    name: str
    purchase_price: float
    purchase_date: date
    expected_lifetime: Optional[int] = None
    status: ItemStatus
    notes: Optional[str] = None
    image_url: Optional[str] = None
    sale_price: Optional[float] = None
    sale_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    category: Optional[CategoryResponse] = None


class ItemWithStats(ItemResponse):
    """Item plus its derived per-item statistics."""
    days_used: int
    daily_cost: float
    usage_efficiency: Optional[float] = None


class PaginatedItems(CamelModel):
    items: List[ItemWithStats]
    total: int
    page: int
    limit: int
    total_pages: int


class ItemListParams(CamelModel):
    """Validated list query: pagination, search, filters and ordering."""
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    search: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[ItemStatus] = None
    sort_by: ItemSortBy = ItemSortBy.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC


class UsageRecordCreate(CamelModel):
    usage_date: date
    note: Optional[str] = Field(None, max_length=200)


class UsageRecordResponse(CamelModel):
    id: str
    item_id: str
    usage_date: date
    note: Optional[str] = None
    created_at: datetime
