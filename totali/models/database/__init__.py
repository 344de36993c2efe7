# totali/models/database/__init__.py
"""Database models initialization."""

from .base import Base
from .user import User
from .category import Category
from .item import Item, ItemStatus, UsageRecord

# This makes imports cleaner elsewhere in the application
__all__ = [
    'Base',
    'User',
    'Category',
    'Item',
    'ItemStatus',
    'UsageRecord',
]
