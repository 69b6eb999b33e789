"""Transaction listing, search, manual categorization and edits."""

import logging
from contextlib import nullcontext
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.categorization.rules import merge_keywords, suggested_keywords
from budgetsync.core.exceptions import NotFoundError
from budgetsync.core.locks import UserLockRegistry
from budgetsync.db.session import atomic
from budgetsync.models.transaction import Transaction
from budgetsync.repositories.category import CategoryRepository
from budgetsync.repositories.transaction import TransactionRepository
from budgetsync.schemas.transaction import (
    TransactionCategorizeResult,
    TransactionDeleteResult,
    TransactionSearchResult,
    TransactionUpdateRequest,
)
from budgetsync.services.categorization import CategorizationService

logger = logging.getLogger(__name__)


class TransactionService:
    """Service layer for transaction operations."""

    def __init__(self, db: AsyncSession, locks: UserLockRegistry | None = None):
        self.db = db
        self.locks = locks
        self.transaction_repo = TransactionRepository(db)
        self.category_repo = CategoryRepository(db)
        self.categorization = CategorizationService(db)

    async def list_transactions(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        include_removed: bool = False,
    ) -> list[Transaction]:
        return await self.transaction_repo.list_recent(
            user_id, skip=offset, limit=limit, include_removed=include_removed
        )

    async def search(
        self, user_id: str, query: str | None, limit: int = 20
    ) -> list[TransactionSearchResult]:
        """Prefix search on name, each hit with keyword suggestions."""
        transactions = await self.transaction_repo.search_by_name_prefix(user_id, query, limit)
        return [
            TransactionSearchResult.model_validate(txn).model_copy(
                update={
                    "suggested_keywords": suggested_keywords(txn.name, txn.merchant_name)
                }
            )
            for txn in transactions
        ]

    async def get_transaction(self, user_id: str, transaction_id: str) -> Transaction:
        txn = await self.transaction_repo.get_by_user(user_id, transaction_id)
        if txn is None:
            raise NotFoundError("API_002")
        return txn

    async def assign_category(
        self,
        user_id: str,
        transaction_id: str,
        category_id: UUID,
        apply_to_similar: bool = False,
    ) -> TransactionCategorizeResult:
        """Assign a category by hand.

        With ``apply_to_similar`` the transaction's name and merchant name
        join the category's keywords and every transaction is reconciled.
        The manual choice itself is not pinned: a later reconciliation may
        move the transaction again.
        """
        lock = self.locks.category_lock(user_id) if self.locks else nullcontext()
        async with lock:
            txn = await self.get_transaction(user_id, transaction_id)
            category = await self.category_repo.get_by_user(user_id, category_id)
            if category is None:
                raise NotFoundError("API_001")

            keywords_added: list[str] = []
            async with atomic(self.db):
                txn.category_id = category.id
                txn.category_name = category.name
                if apply_to_similar:
                    additions = [
                        value.lower() for value in (txn.name, txn.merchant_name) if value
                    ]
                    existing = list(category.keywords or [])
                    merged = merge_keywords(existing, additions)
                    keywords_added = merged[len(existing):]
                    category.keywords = merged
                await self.db.flush()

            recategorized = 0
            if apply_to_similar:
                recategorized = (await self.categorization.reconcile_all(user_id)).updated

        logger.info(
            "Transaction categorized manually",
            extra={
                "user_id": user_id,
                "transaction_id": transaction_id,
                "category_id": str(category_id),
                "keywords_added": len(keywords_added),
            },
        )
        return TransactionCategorizeResult(
            keywords_added=keywords_added, recategorized=recategorized
        )

    async def update_transaction(
        self, user_id: str, transaction_id: str, request: TransactionUpdateRequest
    ) -> Transaction:
        """Apply a partial edit. An explicit null category clears it."""
        txn = await self.get_transaction(user_id, transaction_id)
        changes = request.model_dump(exclude_unset=True)

        category = None
        if changes.get("category_id") is not None:
            category = await self.category_repo.get_by_user(user_id, changes["category_id"])
            if category is None:
                raise NotFoundError("API_001")

        async with atomic(self.db):
            for field in ("name", "merchant_name", "amount", "date"):
                if field in changes and (changes[field] is not None or field == "merchant_name"):
                    setattr(txn, field, changes[field])
            if "category_id" in changes:
                txn.category_id = category.id if category else None
                txn.category_name = category.name if category else None
            await self.db.flush()

        return txn

    async def delete_transaction(
        self, user_id: str, transaction_id: str
    ) -> TransactionDeleteResult:
        txn = await self.get_transaction(user_id, transaction_id)
        async with atomic(self.db):
            await self.transaction_repo.remove(txn)
        logger.info(
            "Transaction deleted",
            extra={"user_id": user_id, "transaction_id": transaction_id},
        )
        return TransactionDeleteResult(message="Transaction deleted successfully")
