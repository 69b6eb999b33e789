"""Category repository. Enumeration order is ``position`` then creation time."""
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.models.category import Category
from budgetsync.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model with user-scoped security."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def get_by_user(self, user_id: str, category_id: UUID) -> Category | None:
        """Get category only if it belongs to the specified user."""
        result = await self.db.execute(
            select(Category).where(Category.id == category_id, Category.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_all_by_user(self, user_id: str) -> list[Category]:
        """All categories of a user in matching order."""
        result = await self.db.execute(
            select(Category)
            .where(Category.user_id == user_id)
            .order_by(Category.position, Category.created_at)
        )
        return list(result.scalars().all())

    async def get_by_budget(self, user_id: str, budget_id: UUID) -> list[Category]:
        result = await self.db.execute(
            select(Category)
            .where(Category.user_id == user_id, Category.budget_id == budget_id)
            .order_by(Category.position, Category.created_at)
        )
        return list(result.scalars().all())

    async def next_position(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.max(Category.position)).where(Category.user_id == user_id)
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    async def delete_by_budget(self, user_id: str, budget_id: UUID) -> int:
        """Stage deletion of every category in a budget."""
        result = await self.db.execute(
            delete(Category)
            .where(Category.user_id == user_id, Category.budget_id == budget_id)
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)
