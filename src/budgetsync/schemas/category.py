"""Category request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from budgetsync.schemas.common import ApiModel


class CategoryCreateRequest(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    amount: int = Field(0, ge=0, description="Budgeted amount in cents")
    keywords: list[str] = Field(default_factory=list)
    budget_id: UUID | None = Field(None, alias="budgetId")
    color: str | None = None


class CategoryUpdateRequest(ApiModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    amount: int | None = Field(None, ge=0)
    keywords: list[str] | None = None
    color: str | None = None


class CategoryResponse(ApiModel):
    id: UUID
    name: str
    amount: int = Field(description="Budgeted amount in cents")
    keywords: list[str]
    budget_id: UUID | None = Field(None, alias="budgetId")
    color: str | None = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class CategoryWriteResult(CategoryResponse):
    """Category after a create/update, with the reconciliation count."""

    recategorized: int


class CategoryDeleteResult(ApiModel):
    ok: bool = True
    recategorized: int
