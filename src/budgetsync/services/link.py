"""Bank link flow: link token creation and public token exchange."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.core.exceptions import UpstreamError, ValidationError
from budgetsync.db.session import atomic
from budgetsync.providers.base import ProviderError, ProviderTimeoutError, TransactionProvider
from budgetsync.repositories.access_credential import AccessCredentialRepository

logger = logging.getLogger(__name__)


class LinkService:
    """Connects a user's bank through the provider's link widget."""

    def __init__(self, db: AsyncSession, provider: TransactionProvider):
        self.db = db
        self.provider = provider
        self.credential_repo = AccessCredentialRepository(db)

    async def create_link_token(self, user_id: str) -> str:
        try:
            return await self.provider.create_link_token(user_id)
        except ProviderTimeoutError as e:
            raise UpstreamError("PROV_002") from e
        except ProviderError as e:
            raise UpstreamError("PROV_001", message=str(e)) from e

    async def exchange_public_token(self, user_id: str, public_token: str) -> None:
        """Trade a public token for an access token and store it.

        Raises:
            ValidationError: Empty public token
            UpstreamError: Exchange failed
        """
        if not public_token:
            raise ValidationError("VAL_001", message="Missing public_token")

        try:
            exchange = await self.provider.exchange_public_token(public_token)
        except ProviderTimeoutError as e:
            raise UpstreamError("PROV_002") from e
        except ProviderError as e:
            raise UpstreamError("PROV_001", message=str(e)) from e

        async with atomic(self.db):
            await self.credential_repo.store_link(
                user_id, exchange.access_token, exchange.item_id
            )

        logger.info(
            "Bank linked", extra={"user_id": user_id, "item_id": exchange.item_id}
        )
