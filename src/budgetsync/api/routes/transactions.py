"""Transaction endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.api.deps import get_current_user_id, get_db, get_locks
from budgetsync.core.locks import UserLockRegistry
from budgetsync.schemas.transaction import (
    TransactionCategorizeRequest,
    TransactionCategorizeResult,
    TransactionDeleteResult,
    TransactionResponse,
    TransactionSearchResult,
    TransactionUpdateRequest,
)
from budgetsync.services.transactions import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List transactions",
    description="""
    Transactions newest date first. Amounts are integer cents; positive
    means money left the account. Transactions removed upstream are hidden
    unless `include_removed` is true.
    """,
)
async def list_transactions(
    limit: int = Query(50, ge=1, le=500, description="Max items to return"),
    offset: int = Query(0, ge=0, description="Items to skip"),
    include_removed: bool = Query(False, description="Include transactions removed upstream"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[TransactionResponse]:
    transactions = await TransactionService(db).list_transactions(
        user_id, limit=limit, offset=offset, include_removed=include_removed
    )
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.get(
    "/search",
    response_model=list[TransactionSearchResult],
    summary="Search transactions by name prefix",
)
async def search_transactions(
    query: str | None = Query(None, description="Name prefix (case-sensitive)"),
    limit: int = Query(20, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[TransactionSearchResult]:
    """Prefix search; each hit carries keyword suggestions for categorizing similar ones."""
    return await TransactionService(db).search(user_id, query, limit)


@router.post(
    "/{transaction_id}/categorize",
    response_model=TransactionCategorizeResult,
    summary="Assign a category by hand",
    description="""
    Assign a category to one transaction. With `applyToSimilar: true` the
    transaction's name and merchant name are added to the category's
    keywords and all transactions are re-categorized.
    """,
)
async def categorize_transaction(
    transaction_id: str,
    body: TransactionCategorizeRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> TransactionCategorizeResult:
    return await TransactionService(db, locks).assign_category(
        user_id, transaction_id, body.category_id, body.apply_to_similar
    )


@router.put(
    "/{transaction_id}", response_model=TransactionResponse, summary="Edit a transaction"
)
async def update_transaction(
    transaction_id: str,
    body: TransactionUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> TransactionResponse:
    txn = await TransactionService(db).update_transaction(user_id, transaction_id, body)
    return TransactionResponse.model_validate(txn)


@router.delete(
    "/{transaction_id}",
    response_model=TransactionDeleteResult,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> TransactionDeleteResult:
    return await TransactionService(db).delete_transaction(user_id, transaction_id)
