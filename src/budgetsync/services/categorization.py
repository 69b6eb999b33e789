"""Full-collection category reconciliation."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.categorization.rules import categorize
from budgetsync.db.session import atomic
from budgetsync.models.category import Category
from budgetsync.models.transaction import Transaction
from budgetsync.repositories.category import CategoryRepository
from budgetsync.repositories.transaction import TransactionRepository
from budgetsync.schemas.sync import ReconcileResult

logger = logging.getLogger(__name__)


def apply_categories(transactions: list[Transaction], categories: list[Category]) -> int:
    """Recompute each transaction's category in place.

    A transaction is touched only when its category id or cached category
    name differs from the computed one.

    Returns:
        Number of transactions changed
    """
    updated = 0
    for txn in transactions:
        matched = categorize(txn, categories)
        new_id = matched.id if matched is not None else None
        new_name = matched.name if matched is not None else None
        if txn.category_id != new_id or txn.category_name != new_name:
            txn.category_id = new_id
            txn.category_name = new_name
            updated += 1
    return updated


class CategorizationService:
    """Keeps every stored transaction's category consistent with the rules.

    Running ``reconcile_all`` twice with no category change in between
    updates nothing the second time.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def reconcile_all(self, user_id: str) -> ReconcileResult:
        """Re-derive the category of every transaction of a user."""
        async with atomic(self.db):
            categories = await self.category_repo.get_all_by_user(user_id)
            transactions = await self.transaction_repo.get_all_by_user(user_id)
            updated = apply_categories(transactions, categories)
            await self.db.flush()

        if updated:
            logger.info(
                f"Re-categorized {updated} of {len(transactions)} transactions",
                extra={"user_id": user_id},
            )
        else:
            logger.debug(
                "No transactions needed re-categorization", extra={"user_id": user_id}
            )
        return ReconcileResult(updated=updated, total=len(transactions))
