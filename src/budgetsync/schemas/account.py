"""Account request/response schemas."""

from pydantic import Field

from budgetsync.schemas.common import ApiModel


class AccountResponse(ApiModel):
    account_id: str
    name: str
    official_name: str | None = None
    mask: str | None = None
    subtype: str | None = None
    type: str | None = None
    institution_id: str | None = None
    institution_name: str | None = None
    institution_logo: str | None = None


class InstitutionGroup(ApiModel):
    institution_id: str | None = None
    institution_name: str | None = None
    institution_logo: str | None = None
    accounts: list[AccountResponse] = Field(default_factory=list)


class AccountListResult(ApiModel):
    institutions: list[InstitutionGroup]
    accounts: list[AccountResponse]


class AccountRefreshResult(ApiModel):
    ok: bool = True
    count: int = Field(description="Accounts reported by the provider")
    added: int
    updated: int


class AccountDeleteRequest(ApiModel):
    delete_transactions: bool = Field(False, alias="deleteTransactions")


class AccountDeleteResult(ApiModel):
    message: str
    transactions_deleted: bool = Field(alias="transactionsDeleted")
    transactions_deleted_count: int = Field(0, alias="transactionsDeletedCount")
