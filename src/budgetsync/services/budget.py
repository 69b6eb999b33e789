"""Budget and category lifecycle.

Every write that can change which category a transaction falls into is
followed by a full reconciliation, so the response carries an up-to-date
``recategorized`` count.
"""

import logging
from contextlib import nullcontext
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.categorization.defaults import DEFAULT_BUDGET_NAME, DEFAULT_CATEGORIES
from budgetsync.core.exceptions import ConflictError, NotFoundError
from budgetsync.core.locks import UserLockRegistry
from budgetsync.db.session import atomic
from budgetsync.models.budget import Budget
from budgetsync.models.category import Category
from budgetsync.repositories.budget import BudgetRepository
from budgetsync.repositories.category import CategoryRepository
from budgetsync.schemas.budget import (
    BudgetDeleteResult,
    BudgetResponse,
    BudgetWriteResult,
    InitializeAccountResult,
)
from budgetsync.schemas.category import (
    CategoryCreateRequest,
    CategoryDeleteResult,
    CategoryResponse,
    CategoryUpdateRequest,
    CategoryWriteResult,
)
from budgetsync.services.categorization import CategorizationService

logger = logging.getLogger(__name__)


class BudgetService:
    """Service layer for budgets and their categories."""

    def __init__(self, db: AsyncSession, locks: UserLockRegistry | None = None):
        self.db = db
        self.locks = locks
        self.budget_repo = BudgetRepository(db)
        self.category_repo = CategoryRepository(db)
        self.categorization = CategorizationService(db)

    def _category_lock(self, user_id: str):
        return self.locks.category_lock(user_id) if self.locks else nullcontext()

    async def _reconcile(self, user_id: str) -> int:
        result = await self.categorization.reconcile_all(user_id)
        return result.updated

    async def _budget_view(self, user_id: str, budget: Budget) -> BudgetResponse:
        categories = await self.category_repo.get_by_budget(user_id, budget.id)
        return BudgetResponse(
            id=budget.id,
            name=budget.name,
            categories=[CategoryResponse.model_validate(c) for c in categories],
            total_budget=sum(c.amount for c in categories),
            created_at=budget.created_at,
            updated_at=budget.updated_at,
        )

    async def _stage_categories(
        self, user_id: str, budget_id: UUID | None, fields: list[dict]
    ) -> list[Category]:
        position = await self.category_repo.next_position(user_id)
        staged = []
        for item in fields:
            category = Category(
                user_id=user_id,
                budget_id=budget_id,
                name=item["name"],
                amount=item.get("amount") or 0,
                keywords=list(item.get("keywords") or []),
                color=item.get("color"),
                position=position,
            )
            staged.append(await self.category_repo.add(category))
            position += 1
        return staged

    # Budgets

    async def list_budgets(self, user_id: str) -> list[BudgetResponse]:
        budgets = await self.budget_repo.get_all_by_user(user_id)
        return [await self._budget_view(user_id, budget) for budget in budgets]

    async def get_budget(self, user_id: str, budget_id: UUID) -> Budget:
        budget = await self.budget_repo.get_by_user(user_id, budget_id)
        if budget is None:
            raise NotFoundError("API_004")
        return budget

    async def create_budget(
        self, user_id: str, name: str, categories: list[CategoryCreateRequest] | None = None
    ) -> BudgetWriteResult:
        """Create the user's single budget with optional nested categories.

        Raises:
            ConflictError: The user already has a budget
        """
        async with self._category_lock(user_id):
            if await self.budget_repo.exists_for_user(user_id):
                raise ConflictError("BUD_001")

            try:
                async with atomic(self.db):
                    budget = await self.budget_repo.add(Budget(user_id=user_id, name=name))
                    await self._stage_categories(
                        user_id,
                        budget.id,
                        [c.model_dump(exclude={"budget_id"}) for c in categories or []],
                    )
            except IntegrityError as e:
                # Another worker created the budget after our check.
                raise ConflictError("BUD_001") from e

            recategorized = await self._reconcile(user_id)

        logger.info("Budget created", extra={"user_id": user_id, "budget_id": str(budget.id)})
        view = await self._budget_view(user_id, budget)
        return BudgetWriteResult(**view.model_dump(), recategorized=recategorized)

    async def update_budget(self, user_id: str, budget_id: UUID, name: str) -> BudgetResponse:
        budget = await self.get_budget(user_id, budget_id)
        async with atomic(self.db):
            budget.name = name
            await self.db.flush()
        return await self._budget_view(user_id, budget)

    async def delete_budget(self, user_id: str, budget_id: UUID) -> BudgetDeleteResult:
        """Delete a budget together with its categories."""
        async with self._category_lock(user_id):
            budget = await self.get_budget(user_id, budget_id)
            async with atomic(self.db):
                deleted = await self.category_repo.delete_by_budget(user_id, budget_id)
                await self.budget_repo.remove(budget)

            recategorized = await self._reconcile(user_id)

        logger.info(
            f"Budget deleted with {deleted} categories",
            extra={"user_id": user_id, "budget_id": str(budget_id)},
        )
        return BudgetDeleteResult(categories_deleted=deleted, recategorized=recategorized)

    async def initialize_account(self, user_id: str) -> InitializeAccountResult:
        """Provision the starter budget and categories for a new user.

        Raises:
            ConflictError: The user already has a budget
        """
        async with self._category_lock(user_id):
            if await self.budget_repo.exists_for_user(user_id):
                raise ConflictError("BUD_002")

            try:
                async with atomic(self.db):
                    budget = await self.budget_repo.add(
                        Budget(user_id=user_id, name=DEFAULT_BUDGET_NAME)
                    )
                    await self._stage_categories(user_id, budget.id, DEFAULT_CATEGORIES)
            except IntegrityError as e:
                raise ConflictError("BUD_002") from e

            recategorized = await self._reconcile(user_id)

        logger.info("Account initialized with defaults", extra={"user_id": user_id})
        return InitializeAccountResult(
            budget=await self._budget_view(user_id, budget),
            message="Account initialized with default budget and categories",
            recategorized=recategorized,
        )

    # Categories

    async def list_categories(self, user_id: str) -> list[Category]:
        return await self.category_repo.get_all_by_user(user_id)

    async def get_category(self, user_id: str, category_id: UUID) -> Category:
        category = await self.category_repo.get_by_user(user_id, category_id)
        if category is None:
            raise NotFoundError("API_001")
        return category

    async def create_category(
        self, user_id: str, request: CategoryCreateRequest
    ) -> CategoryWriteResult:
        """Create a category at the end of the matching order.

        Without ``budget_id`` the category joins the user's budget, if any.
        """
        async with self._category_lock(user_id):
            if request.budget_id is not None:
                budget_id = (await self.get_budget(user_id, request.budget_id)).id
            else:
                budgets = await self.budget_repo.get_all_by_user(user_id)
                budget_id = budgets[0].id if budgets else None

            async with atomic(self.db):
                [category] = await self._stage_categories(
                    user_id, budget_id, [request.model_dump(exclude={"budget_id"})]
                )

            recategorized = await self._reconcile(user_id)

        logger.info(
            "Category created",
            extra={"user_id": user_id, "category_id": str(category.id)},
        )
        return CategoryWriteResult(
            **CategoryResponse.model_validate(category).model_dump(),
            recategorized=recategorized,
        )

    async def update_category(
        self, user_id: str, category_id: UUID, request: CategoryUpdateRequest
    ) -> CategoryWriteResult:
        async with self._category_lock(user_id):
            category = await self.get_category(user_id, category_id)
            async with atomic(self.db):
                for field, value in request.model_dump(exclude_unset=True).items():
                    if value is None and field != "color":
                        continue
                    if field == "keywords":
                        value = list(value)
                    setattr(category, field, value)
                await self.db.flush()

            recategorized = await self._reconcile(user_id)

        return CategoryWriteResult(
            **CategoryResponse.model_validate(category).model_dump(),
            recategorized=recategorized,
        )

    async def delete_category(self, user_id: str, category_id: UUID) -> CategoryDeleteResult:
        async with self._category_lock(user_id):
            category = await self.get_category(user_id, category_id)
            async with atomic(self.db):
                await self.category_repo.remove(category)

            recategorized = await self._reconcile(user_id)

        logger.info(
            "Category deleted", extra={"user_id": user_id, "category_id": str(category_id)}
        )
        return CategoryDeleteResult(recategorized=recategorized)
