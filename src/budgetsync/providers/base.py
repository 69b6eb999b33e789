"""Transaction provider contract.

Services talk to the provider only through ``TransactionProvider``; the
Plaid implementation lives in ``budgetsync.providers.plaid`` and tests plug
in fakes.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol, Self

from pydantic import BaseModel, ConfigDict, Field

MUTATION_DURING_PAGINATION = "TRANSACTIONS_SYNC_MUTATION_DURING_PAGINATION"


class ProviderError(Exception):
    """Base error for transaction provider failures.

    Attributes:
        error_code: Provider error code when the provider sent one
    """

    def __init__(self, message: str, error_code: str | None = None):
        self.error_code = error_code
        super().__init__(message)


class ProviderTimeoutError(ProviderError):
    """Raised when a provider request exceeds its timeout."""


class ProviderModel(BaseModel):
    """Shared base for provider payloads with a short parse alias."""

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def parse(cls, data: Any) -> Self:
        return cls.model_validate(data)


class ProviderTransaction(ProviderModel):
    transaction_id: str
    account_id: str
    amount: Decimal
    iso_currency_code: str | None = None
    unofficial_currency_code: str | None = None
    date: str
    name: str | None = None
    merchant_name: str | None = None
    pending: bool = False
    location: dict[str, Any] | None = None
    personal_finance_category: dict[str, Any] | None = None

    @property
    def currency(self) -> str | None:
        return self.iso_currency_code or self.unofficial_currency_code

    @property
    def city(self) -> str | None:
        return (self.location or {}).get("city")

    @property
    def primary_category(self) -> str | None:
        return (self.personal_finance_category or {}).get("primary")


class RemovedTransaction(ProviderModel):
    transaction_id: str


class SyncPage(ProviderModel):
    """One page of the incremental sync protocol."""

    added: list[ProviderTransaction] = Field(default_factory=list)
    modified: list[ProviderTransaction] = Field(default_factory=list)
    removed: list[RemovedTransaction] = Field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


class TokenExchange(ProviderModel):
    access_token: str
    item_id: str


class ProviderAccount(ProviderModel):
    account_id: str
    name: str | None = None
    official_name: str | None = None
    mask: str | None = None
    subtype: str | None = None
    type: str | None = None


class ProviderItem(ProviderModel):
    item_id: str
    institution_id: str | None = None
    institution_name: str | None = None


class AccountsResult(ProviderModel):
    accounts: list[ProviderAccount] = Field(default_factory=list)
    item: ProviderItem


class Institution(ProviderModel):
    institution_id: str
    name: str | None = None
    logo: str | None = None


class TransactionProvider(Protocol):
    """Remote capabilities the service needs from the provider."""

    async def create_link_token(self, user_id: str) -> str: ...

    async def exchange_public_token(self, public_token: str) -> TokenExchange: ...

    async def list_accounts(self, access_token: str) -> AccountsResult: ...

    async def get_institution(self, institution_id: str) -> Institution: ...

    async def sync_transactions(
        self, access_token: str, cursor: str | None, count: int
    ) -> SyncPage: ...
