"""Budget request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from budgetsync.schemas.category import CategoryCreateRequest, CategoryResponse
from budgetsync.schemas.common import ApiModel


class BudgetCreateRequest(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    categories: list[CategoryCreateRequest] = Field(default_factory=list)


class BudgetUpdateRequest(ApiModel):
    name: str = Field(min_length=1, max_length=255)


class BudgetResponse(ApiModel):
    id: UUID
    name: str
    categories: list[CategoryResponse] = Field(default_factory=list)
    total_budget: int = Field(alias="totalBudget", description="Sum of category amounts in cents")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class BudgetWriteResult(BudgetResponse):
    recategorized: int = 0


class BudgetDeleteResult(ApiModel):
    ok: bool = True
    categories_deleted: int = Field(alias="categoriesDeleted")
    recategorized: int


class InitializeAccountResult(ApiModel):
    budget: BudgetResponse
    message: str
    recategorized: int
