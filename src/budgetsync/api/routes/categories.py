"""Category endpoints.

Every write re-categorizes all of the caller's transactions before
responding and reports how many changed as ``recategorized``.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.api.deps import get_current_user_id, get_db, get_locks
from budgetsync.core.locks import UserLockRegistry
from budgetsync.schemas.category import (
    CategoryCreateRequest,
    CategoryDeleteResult,
    CategoryResponse,
    CategoryUpdateRequest,
    CategoryWriteResult,
)
from budgetsync.services.budget import BudgetService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse], summary="List categories")
async def list_categories(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[CategoryResponse]:
    """Categories in matching order."""
    categories = await BudgetService(db).list_categories(user_id)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryWriteResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    body: CategoryCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> CategoryWriteResult:
    return await BudgetService(db, locks).create_category(user_id, body)


@router.put("/{category_id}", response_model=CategoryWriteResult, summary="Update a category")
async def update_category(
    category_id: UUID,
    body: CategoryUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> CategoryWriteResult:
    return await BudgetService(db, locks).update_category(user_id, category_id, body)


@router.delete(
    "/{category_id}", response_model=CategoryDeleteResult, summary="Delete a category"
)
async def delete_category(
    category_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: UserLockRegistry = Depends(get_locks),
) -> CategoryDeleteResult:
    return await BudgetService(db, locks).delete_category(user_id, category_id)
