"""Transaction repository keyed by (user_id, provider transaction id)."""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.models.transaction import Transaction
from budgetsync.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model with listing and search queries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_by_user(self, user_id: str, transaction_id: str) -> Transaction | None:
        return await self.get_by_id((user_id, transaction_id))

    async def get_all_by_user(self, user_id: str) -> list[Transaction]:
        """Every stored transaction of a user, removed ones included."""
        result = await self.db.execute(
            select(Transaction).where(Transaction.user_id == user_id).order_by(Transaction.id)
        )
        return list(result.scalars().all())

    async def list_recent(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
        include_removed: bool = False,
    ) -> list[Transaction]:
        """Transactions newest date first, with pagination."""
        query = select(Transaction).where(Transaction.user_id == user_id)
        if not include_removed:
            query = query.where(Transaction.removed.is_(False))
        result = await self.db.execute(
            query.order_by(Transaction.date.desc(), Transaction.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def search_by_name_prefix(
        self, user_id: str, prefix: str | None, limit: int = 20
    ) -> list[Transaction]:
        """Transactions whose name starts with ``prefix``, newest first."""
        query = select(Transaction).where(Transaction.user_id == user_id)
        if prefix:
            query = query.where(Transaction.name.startswith(prefix, autoescape=True))
        result = await self.db.execute(
            query.order_by(Transaction.date.desc(), Transaction.id).limit(limit)
        )
        return list(result.scalars().all())

    async def mark_removed(self, user_id: str, transaction_ids: list[str]) -> int:
        """Stage the soft-delete marker on stored transactions.

        Ids that were never stored are skipped.
        """
        marked = 0
        for transaction_id in transaction_ids:
            txn = await self.get_by_user(user_id, transaction_id)
            if txn is None:
                continue
            txn.removed = True
            marked += 1
        await self.db.flush()
        return marked

    async def delete_by_account(self, user_id: str, account_id: str) -> int:
        """Stage hard deletion of every transaction of one account."""
        result = await self.db.execute(
            delete(Transaction)
            .where(Transaction.user_id == user_id, Transaction.account_id == account_id)
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)
