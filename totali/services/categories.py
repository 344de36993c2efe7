"""Category management: system categories plus each user's own."""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from totali.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from totali.core.logging import get_logger
from totali.database.repositories.categories import CategoryRepository
from totali.models.database.category import Category
from totali.models.domain.category import CategoryCreate, CategoryResponse, CategoryWithStats

logger = get_logger(__name__)

# (id, name, icon) of the categories every user can see
SYSTEM_CATEGORIES = [
    ("sys-electronics", "Electronics", "laptop"),
    ("sys-clothing", "Clothing & Accessories", "shirt"),
    ("sys-household", "Household", "home"),
    ("sys-sports", "Sports & Fitness", "dumbbell"),
    ("sys-books", "Books & Stationery", "book"),
    ("sys-other", "Other", "package"),
]


def _with_stats(category: Category, item_count: int) -> CategoryWithStats:
    return CategoryWithStats(
        **CategoryResponse.model_validate(category).model_dump(),
        item_count=item_count,
    )


async def ensure_system_categories(session: AsyncSession) -> int:
    """Insert any missing system categories; returns how many were created."""
    repository = CategoryRepository(session)
    created = 0
    for category_id, name, icon in SYSTEM_CATEGORIES:
        if await repository.get(category_id) is not None:
            continue
        await repository.create(id=category_id, user_id=None, name=name, icon=icon, is_system=True)
        created += 1

    await session.commit()
    if created:
        logger.info("System categories seeded", created=created)
    return created


class CategoryService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.categories = CategoryRepository(session)

    async def list_categories(self, user_id: str) -> List[CategoryWithStats]:
        rows = await self.categories.list_visible(user_id)
        return [_with_stats(category, count) for category, count in rows]

    async def create_category(self, user_id: str, payload: CategoryCreate) -> CategoryResponse:
        if await self.categories.get_by_name(user_id, payload.name) is not None:
            raise BadRequestError(f'Category "{payload.name}" already exists')

        category = await self.categories.create(
            user_id=user_id,
            name=payload.name,
            icon=payload.icon,
            is_system=False,
        )
        await self.session.commit()
        logger.info("Category created", user_id=user_id, category_id=category.id)
        return CategoryResponse.model_validate(category)

    async def delete_category(self, user_id: str, category_id: str) -> None:
        """Delete one of the user's own, empty categories.

        Raises:
            NotFoundError: no such category
            BadRequestError: system category, or it still has items
            ForbiddenError: category belongs to someone else
        """
        category = await self.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        if category.is_system:
            raise BadRequestError("System categories cannot be deleted")
        if category.user_id != user_id:
            raise ForbiddenError("Not allowed to delete this category")

        item_count = await self.categories.count_active_items(category_id)
        if item_count > 0:
            raise BadRequestError(
                f"Category still has {item_count} items and cannot be deleted"
            )

        await self.categories.delete(category)
        await self.session.commit()
        logger.info("Category deleted", user_id=user_id, category_id=category_id)

    async def get_category_stats(self, user_id: str, category_id: str) -> CategoryWithStats:
        row = await self.categories.get_visible_with_count(category_id, user_id)
        if row is None:
            raise NotFoundError("Category not found or not accessible")
        return _with_stats(*row)
