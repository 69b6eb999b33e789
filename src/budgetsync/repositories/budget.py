"""Budget repository with user-scoped queries."""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.models.budget import Budget
from budgetsync.repositories.base import BaseRepository


class BudgetRepository(BaseRepository[Budget]):
    """Repository for Budget model with user-scoped security."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Budget)

    async def get_by_user(self, user_id: str, budget_id: UUID) -> Budget | None:
        """Get budget only if it belongs to the specified user."""
        result = await self.db.execute(
            select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_all_by_user(self, user_id: str) -> list[Budget]:
        result = await self.db.execute(
            select(Budget).where(Budget.user_id == user_id).order_by(Budget.created_at)
        )
        return list(result.scalars().all())

    async def exists_for_user(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(Budget.id)).where(Budget.user_id == user_id)
        )
        return (result.scalar() or 0) > 0
