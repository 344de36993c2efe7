# File: totali/models/database/item.py

"""Item and UsageRecord models."""

import enum
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Date, Enum, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, SoftDeleteMixin


class ItemStatus(str, enum.Enum):
    """Lifecycle status of an owned item."""
    ACTIVE = "ACTIVE"
    RETIRED = "RETIRED"
    SOLD = "SOLD"


class Item(AuditMixin, SoftDeleteMixin, Base):
    """A personally owned item tracked for value and usage."""
    __tablename__ = 'items'

    user_id: Mapped[str] = mapped_column(
        ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey('categories.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_lifetime: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[ItemStatus] = mapped_column(
        Enum(ItemStatus, name='item_status'),
        default=ItemStatus.ACTIVE,
        nullable=False
    )
    sale_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    sale_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="items")
    category: Mapped[Optional["Category"]] = relationship(back_populates="items")
    usage_records: Mapped[List["UsageRecord"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index('idx_item_user_active', 'user_id', 'deleted_at'),
        Index('idx_item_user_purchase_date', 'user_id', 'purchase_date'),
    )


class UsageRecord(AuditMixin, Base):
    """One recorded day of use for an item."""
    __tablename__ = 'usage_records'

    item_id: Mapped[str] = mapped_column(
        ForeignKey('items.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    usage_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Relationship
    item: Mapped["Item"] = relationship(back_populates="usage_records")

    __table_args__ = (
        UniqueConstraint('item_id', 'usage_date', name='uq_usage_item_date'),
    )
