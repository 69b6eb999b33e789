"""Transaction request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, computed_field

from budgetsync.core import money
from budgetsync.schemas.common import ApiModel


class TransactionResponse(ApiModel):
    """Transaction as stored. Amounts are in cents, positive = outflow."""

    id: str
    account_id: str | None = None
    date: str | None = None
    name: str
    merchant_name: str | None = None
    city: str | None = None
    amount: int
    currency: str | None = None
    pending: bool = False
    provider_category: str | None = Field(None, alias="providerCategory")
    category_id: UUID | None = Field(None, alias="category")
    category_name: str | None = Field(None, alias="categoryName")
    removed: bool = False
    updated_at: datetime | None = Field(None, alias="updatedAt")

    @computed_field
    @property
    def outflow(self) -> int | None:
        return money.outflow(self.amount)

    @computed_field
    @property
    def inflow(self) -> int | None:
        return money.inflow(self.amount)


class TransactionSearchResult(TransactionResponse):
    suggested_keywords: list[str] = Field(default_factory=list, alias="suggestedKeywords")


class TransactionCategorizeRequest(ApiModel):
    category_id: UUID = Field(alias="categoryId")
    apply_to_similar: bool = Field(False, alias="applyToSimilar")


class TransactionCategorizeResult(ApiModel):
    ok: bool = True
    keywords_added: list[str] = Field(default_factory=list, alias="keywordsAdded")
    recategorized: int = 0


class TransactionUpdateRequest(ApiModel):
    """Partial edit; omitted fields are left unchanged, ``category: null`` clears it."""

    name: str | None = None
    merchant_name: str | None = None
    amount: int | None = Field(None, description="Amount in cents")
    date: str | None = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    category_id: UUID | None = Field(None, alias="category")


class TransactionDeleteResult(ApiModel):
    message: str
