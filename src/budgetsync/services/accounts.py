"""Account registry: mirror provider accounts and manage them locally."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.core.exceptions import NotFoundError, PreconditionFailedError, UpstreamError
from budgetsync.db.session import atomic
from budgetsync.models.account import Account
from budgetsync.providers.base import ProviderError, ProviderTimeoutError, TransactionProvider
from budgetsync.repositories.access_credential import AccessCredentialRepository
from budgetsync.repositories.account import AccountRepository
from budgetsync.repositories.transaction import TransactionRepository
from budgetsync.schemas.account import (
    AccountDeleteResult,
    AccountListResult,
    AccountRefreshResult,
    AccountResponse,
    InstitutionGroup,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service layer for bank account operations."""

    def __init__(self, db: AsyncSession, provider: TransactionProvider | None = None):
        self.db = db
        self.provider = provider
        self.credential_repo = AccessCredentialRepository(db)
        self.account_repo = AccountRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def refresh_accounts(self, user_id: str) -> AccountRefreshResult:
        """Fetch the linked item's accounts and upsert them.

        Raises:
            PreconditionFailedError: No bank linked
            UpstreamError: Account listing failed
        """
        credential = await self.credential_repo.get_for_user(user_id)
        if credential is None:
            raise PreconditionFailedError("LINK_001")

        try:
            result = await self.provider.list_accounts(credential.access_token)
        except ProviderTimeoutError as e:
            raise UpstreamError("PROV_002") from e
        except ProviderError as e:
            raise UpstreamError("PROV_001", message=str(e)) from e

        institution_id = result.item.institution_id
        institution_name = result.item.institution_name
        institution_logo = ""
        if institution_id:
            try:
                institution = await self.provider.get_institution(institution_id)
                institution_logo = institution.logo or ""
                institution_name = institution_name or institution.name
            except ProviderError as e:
                logger.warning(
                    f"Could not fetch institution logo: {e}",
                    extra={"user_id": user_id, "institution_id": institution_id},
                )

        added = 0
        updated = 0
        async with atomic(self.db):
            for account in result.accounts:
                _, created = await self.account_repo.upsert_merge(
                    (user_id, account.account_id),
                    {
                        "name": account.name or account.official_name or "Account",
                        "official_name": account.official_name or None,
                        "mask": account.mask or None,
                        "subtype": account.subtype or None,
                        "type": account.type or None,
                        "institution_id": institution_id,
                        "institution_name": institution_name,
                        "institution_logo": institution_logo,
                    },
                )
                if created:
                    added += 1
                else:
                    updated += 1

        logger.info(
            f"Accounts processed: {added} added, {updated} updated",
            extra={"user_id": user_id},
        )
        return AccountRefreshResult(
            count=len(result.accounts), added=added, updated=updated
        )

    async def list_grouped(self, user_id: str) -> AccountListResult:
        """List accounts, also grouped by institution in first-seen order."""
        accounts = [
            AccountResponse.model_validate(a)
            for a in await self.account_repo.get_all_by_user(user_id)
        ]

        groups: dict[str | None, InstitutionGroup] = {}
        for account in accounts:
            group = groups.get(account.institution_id)
            if group is None:
                group = groups[account.institution_id] = InstitutionGroup(
                    institution_id=account.institution_id,
                    institution_name=account.institution_name,
                    institution_logo=account.institution_logo,
                )
            group.accounts.append(account)

        return AccountListResult(institutions=list(groups.values()), accounts=accounts)

    async def get_account(self, user_id: str, account_id: str) -> Account:
        account = await self.account_repo.get_by_user(user_id, account_id)
        if account is None:
            raise NotFoundError("API_003")
        return account

    async def delete_account(
        self, user_id: str, account_id: str, delete_transactions: bool = False
    ) -> AccountDeleteResult:
        """Delete an account, optionally with all of its transactions.

        Both deletions commit together.
        """
        account = await self.get_account(user_id, account_id)

        deleted_count = 0
        async with atomic(self.db):
            if delete_transactions:
                deleted_count = await self.transaction_repo.delete_by_account(
                    user_id, account_id
                )
            await self.account_repo.remove(account)

        if delete_transactions:
            logger.info(
                f"Deleted {deleted_count} transactions for account {account_id}",
                extra={"user_id": user_id},
            )
        return AccountDeleteResult(
            message="Account deleted successfully",
            transactions_deleted=delete_transactions,
            transactions_deleted_count=deleted_count,
        )
