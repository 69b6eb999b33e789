"""Bank account endpoints."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.api.deps import get_current_user_id, get_db, get_provider
from budgetsync.providers.base import TransactionProvider
from budgetsync.schemas.account import (
    AccountDeleteRequest,
    AccountDeleteResult,
    AccountListResult,
    AccountRefreshResult,
)
from budgetsync.services.accounts import AccountService

router = APIRouter(tags=["accounts"])


@router.post(
    "/get-accounts",
    response_model=AccountRefreshResult,
    summary="Refresh accounts from the bank",
    description="""
    Fetch the linked item's accounts from the provider and store them,
    together with the institution's name and logo.
    """,
)
async def refresh_accounts(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    provider: TransactionProvider = Depends(get_provider),
) -> AccountRefreshResult:
    return await AccountService(db, provider).refresh_accounts(user_id)


@router.get(
    "/accounts",
    response_model=AccountListResult,
    summary="List accounts grouped by institution",
)
async def list_accounts(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> AccountListResult:
    return await AccountService(db).list_grouped(user_id)


@router.delete(
    "/accounts/{account_id}",
    response_model=AccountDeleteResult,
    summary="Delete an account",
    description="""
    Delete an account. With `deleteTransactions: true` every transaction of
    that account is deleted in the same commit.
    """,
)
async def delete_account(
    account_id: str,
    body: AccountDeleteRequest | None = Body(None),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> AccountDeleteResult:
    delete_transactions = body.delete_transactions if body else False
    return await AccountService(db).delete_account(user_id, account_id, delete_transactions)
