"""Transaction sync engine.

One call pulls every pending page from the provider, then writes the
deltas and the new cursor in a single atomic batch:

1. Load the user's access credential and cursor (None means from the start).
2. Page through ``sync_transactions`` one request at a time until the
   provider reports ``has_more = False``.
3. Upsert added/modified transactions by provider id, mark removed ids.
4. Advance the cursor with compare-and-swap on ``sync_version``.
5. After commit, reconcile categories across all of the user's transactions.

A provider failure or timeout in step 2 commits nothing, so the cursor
never moves past data that was not stored.
"""

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.config import Settings, settings
from budgetsync.core.exceptions import (
    ConflictError,
    PreconditionFailedError,
    UpstreamError,
)
from budgetsync.core.locks import UserLockRegistry
from budgetsync.core.money import to_minor_units
from budgetsync.db.session import atomic
from budgetsync.providers.base import (
    MUTATION_DURING_PAGINATION,
    ProviderError,
    ProviderTimeoutError,
    ProviderTransaction,
    TransactionProvider,
)
from budgetsync.repositories.access_credential import AccessCredentialRepository
from budgetsync.repositories.transaction import TransactionRepository
from budgetsync.schemas.sync import SyncResult
from budgetsync.services.categorization import CategorizationService

logger = logging.getLogger(__name__)


@dataclass
class AccumulatedPages:
    """Deltas accumulated across all provider pages of one sync."""

    added: list[ProviderTransaction] = field(default_factory=list)
    modified: list[ProviderTransaction] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    final_cursor: str | None = None
    pages_fetched: int = 0


def to_transaction_record(txn: ProviderTransaction, minor_unit: int) -> dict[str, Any]:
    """Map provider fields onto Transaction columns.

    Category columns are left out so the merge keeps the stored assignment
    until reconciliation recomputes it.
    """
    return {
        "account_id": txn.account_id,
        "date": txn.date,
        "name": txn.name or "",
        "merchant_name": txn.merchant_name or None,
        "city": txn.city or None,
        "amount": to_minor_units(txn.amount, minor_unit),
        "currency": txn.currency,
        "pending": bool(txn.pending),
        "provider_category": txn.primary_category,
    }


class SyncService:
    """Drives the cursor-based incremental sync for one user at a time."""

    def __init__(
        self,
        db: AsyncSession,
        provider: TransactionProvider,
        locks: UserLockRegistry | None = None,
        app_settings: Settings | None = None,
    ):
        self.db = db
        self.provider = provider
        self.locks = locks
        self.settings = app_settings or settings
        self.credential_repo = AccessCredentialRepository(db)
        self.transaction_repo = TransactionRepository(db)
        self.categorization = CategorizationService(db)

    async def sync(self, user_id: str) -> SyncResult:
        """Pull and merge all pending deltas for ``user_id``.

        Raises:
            PreconditionFailedError: No bank linked
            UpstreamError: Provider failure or timeout (nothing committed)
            ConflictError: Another sync committed first (nothing committed)
        """
        lock = self.locks.sync_lock(user_id) if self.locks else nullcontext()
        async with lock:
            return await self._sync(user_id)

    async def _sync(self, user_id: str) -> SyncResult:
        credential = await self.credential_repo.get_for_user(user_id)
        if credential is None:
            raise PreconditionFailedError("LINK_001")

        access_token = credential.access_token
        start_cursor = credential.cursor
        expected_version = credential.sync_version

        try:
            pages = await asyncio.wait_for(
                self._fetch_all_pages(access_token, start_cursor),
                timeout=self.settings.sync_timeout_seconds,
            )
        except (asyncio.TimeoutError, ProviderTimeoutError) as e:
            logger.error("Transaction sync timed out", extra={"user_id": user_id})
            raise UpstreamError("PROV_002") from e
        except ProviderError as e:
            logger.error(
                "Transaction provider failed during sync",
                extra={"user_id": user_id, "error_code": e.error_code},
            )
            raise UpstreamError(
                "PROV_001", message=str(e), details={"provider_error_code": e.error_code}
            ) from e

        minor_unit = self.settings.currency_minor_unit
        async with atomic(self.db):
            for txn in pages.added + pages.modified:
                await self.transaction_repo.upsert_merge(
                    (user_id, txn.transaction_id), to_transaction_record(txn, minor_unit)
                )
            await self.transaction_repo.mark_removed(user_id, pages.removed)

            advanced = await self.credential_repo.advance_cursor(
                user_id, expected_version, pages.final_cursor
            )
            if not advanced:
                logger.warning(
                    "Sync cursor moved concurrently; discarding this sync",
                    extra={"user_id": user_id},
                )
                raise ConflictError("SYNC_001")

        logger.info(
            f"Sync committed: {len(pages.added)} added, {len(pages.modified)} modified, "
            f"{len(pages.removed)} removed",
            extra={"user_id": user_id},
        )

        category_lock = self.locks.category_lock(user_id) if self.locks else nullcontext()
        async with category_lock:
            reconciled = await self.categorization.reconcile_all(user_id)
        return SyncResult(
            added=len(pages.added),
            modified=len(pages.modified),
            removed=len(pages.removed),
            recategorized=reconciled.updated,
        )

    async def _fetch_all_pages(self, access_token: str, cursor: str | None) -> AccumulatedPages:
        """Fetch pages sequentially until the provider has no more.

        A mutation-during-pagination error restarts from ``cursor`` with the
        accumulators cleared, up to ``sync_max_mutation_retries`` times.
        """
        max_retries = self.settings.sync_max_mutation_retries
        retries = 0

        while True:
            pages = AccumulatedPages(final_cursor=cursor)
            current_cursor = cursor
            try:
                while True:
                    logger.debug(f"Fetching sync page (cursor: {current_cursor or 'initial'})")
                    page = await self.provider.sync_transactions(
                        access_token, current_cursor, self.settings.sync_page_size
                    )
                    pages.added.extend(page.added)
                    pages.modified.extend(page.modified)
                    pages.removed.extend(r.transaction_id for r in page.removed)
                    pages.pages_fetched += 1
                    current_cursor = page.next_cursor or current_cursor
                    pages.final_cursor = current_cursor
                    if not page.has_more:
                        break
            except ProviderError as e:
                if e.error_code != MUTATION_DURING_PAGINATION:
                    raise
                if retries >= max_retries:
                    raise ProviderError(
                        f"Failed to sync after {max_retries} retries due to "
                        f"{MUTATION_DURING_PAGINATION}",
                        e.error_code,
                    ) from e
                retries += 1
                logger.warning(
                    f"Mutation detected, restarting fetch (attempt {retries}/{max_retries})"
                )
                continue

            logger.info(
                f"Fetched {len(pages.added)} added, {len(pages.modified)} modified, "
                f"{len(pages.removed)} removed across {pages.pages_fetched} pages"
            )
            return pages
