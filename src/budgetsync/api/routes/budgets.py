"""Budget endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.api.deps import get_current_user_id, get_db, get_locks
from budgetsync.core.locks import UserLockRegistry
from budgetsync.schemas.budget import (
    BudgetCreateRequest,
    BudgetDeleteResult,
    BudgetResponse,
    BudgetUpdateRequest,
    BudgetWriteResult,
    InitializeAccountResult,
)
from budgetsync.services.budget import BudgetService

router = APIRouter(tags=["budgets"])


@router.get(
    "/budgets",
    response_model=list[BudgetResponse],
    summary="List budgets",
    description="Budgets with their categories and the derived `totalBudget`.",
)
async def list_budgets(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[BudgetResponse]:
    return await BudgetService(db).list_budgets(user_id)


@router.post(
    "/budgets",
    response_model=BudgetWriteResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create the budget",
    description="A user has at most one budget; a second create is rejected with CONFLICT.",
)
async def create_budget(
    body: BudgetCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> BudgetWriteResult:
    return await BudgetService(db, locks).create_budget(user_id, body.name, body.categories)


@router.put("/budgets/{budget_id}", response_model=BudgetResponse, summary="Rename a budget")
async def update_budget(
    budget_id: UUID,
    body: BudgetUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> BudgetResponse:
    return await BudgetService(db, locks).update_budget(user_id, budget_id, body.name)


@router.delete(
    "/budgets/{budget_id}",
    response_model=BudgetDeleteResult,
    summary="Delete a budget and its categories",
)
async def delete_budget(
    budget_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> BudgetDeleteResult:
    return await BudgetService(db, locks).delete_budget(user_id, budget_id)


@router.post(
    "/initialize-account",
    response_model=InitializeAccountResult,
    status_code=status.HTTP_201_CREATED,
    summary="Provision the starter budget",
    description="""
    Create "My Budget" with eight starter categories and pre-populated
    keywords, then categorize any stored transactions.
    """,
)
async def initialize_account(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> InitializeAccountResult:
    return await BudgetService(db, locks).initialize_account(user_id)
