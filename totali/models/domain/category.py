# totali/models/domain/category.py
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel


class CategoryCreate(CamelModel):
    """Schema for creating a custom category."""
    name: str = Field(..., min_length=1, max_length=50)
    icon: Optional[str] = Field(None, max_length=50)

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Category name cannot be empty')
        return v.strip()


class CategoryResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    name: str
    icon: Optional[str] = None
    is_system: bool
    created_at: datetime
    updated_at: datetime


class CategoryWithStats(CategoryResponse):
    item_count: int = 0
