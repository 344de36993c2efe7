# File: totali/models/database/user.py

"""User model.

Users are owned by the external identity provider; the local row mirrors the
provider's subject id so items and categories can reference it.
"""

from typing import List, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base


class User(AuditMixin, Base):
    """Local mirror of an identity-provider account."""
    __tablename__ = 'users'

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    items: Mapped[List["Item"]] = relationship(back_populates="owner")
    categories: Mapped[List["Category"]] = relationship(back_populates="owner")
