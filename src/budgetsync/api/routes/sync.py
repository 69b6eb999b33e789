"""Transaction sync and reconciliation endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.api.deps import get_current_user_id, get_db, get_locks, get_provider
from budgetsync.core.locks import UserLockRegistry
from budgetsync.providers.base import TransactionProvider
from budgetsync.schemas.sync import RecategorizeResult, SyncResult
from budgetsync.services.categorization import CategorizationService
from budgetsync.services.sync import SyncService

router = APIRouter(tags=["sync"])


@router.post(
    "/sync-transactions",
    response_model=SyncResult,
    summary="Sync transactions from the bank",
    description="""
    Pull every delta since the stored cursor, merge it, advance the cursor
    and re-categorize.

    Either all pages and the new cursor are stored, or nothing is.
    """,
)
async def sync_transactions(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    provider: TransactionProvider = Depends(get_provider),
    locks: UserLockRegistry = Depends(get_locks),
) -> SyncResult:
    return await SyncService(db, provider, locks).sync(user_id)


@router.post(
    "/recategorize",
    response_model=RecategorizeResult,
    summary="Re-categorize all transactions",
)
async def recategorize(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> RecategorizeResult:
    """Force a full reconciliation of every stored transaction."""
    async with locks.category_lock(user_id):
        result = await CategorizationService(db).reconcile_all(user_id)
    return RecategorizeResult(
        message=f"Re-categorized {result.updated} out of {result.total} transactions",
        updated=result.updated,
        total=result.total,
    )
