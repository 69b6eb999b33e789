"""Account repository with user-scoped queries."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.models.account import Account
from budgetsync.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for Account model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Account)

    async def get_by_user(self, user_id: str, account_id: str) -> Account | None:
        return await self.get_by_id((user_id, account_id))

    async def get_all_by_user(self, user_id: str) -> list[Account]:
        result = await self.db.execute(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.institution_name, Account.name)
        )
        return list(result.scalars().all())

    async def get_ids_by_user(self, user_id: str) -> set[str]:
        result = await self.db.execute(
            select(Account.account_id).where(Account.user_id == user_id)
        )
        return set(result.scalars().all())
