# File: totali/models/database/category.py

"""Category model.

System categories (``is_system``) have no owner and are visible to every
user; all other categories belong to exactly one user.
"""

from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base


class Category(AuditMixin, Base):
    __tablename__ = 'categories'

    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey('users.id', ondelete='CASCADE'),
        nullable=True,
        index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True
    )

    # Relationships
    owner: Mapped[Optional["User"]] = relationship(back_populates="categories")
    items: Mapped[List["Item"]] = relationship(back_populates="category")

    __table_args__ = (
        UniqueConstraint('user_id', 'name', name='uq_category_user_name'),
    )
