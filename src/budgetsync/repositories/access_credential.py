"""Access credential repository: provider token and sync cursor per user."""
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.models.access_credential import AccessCredential
from budgetsync.repositories.base import BaseRepository


class AccessCredentialRepository(BaseRepository[AccessCredential]):
    """Repository for the per-user AccessCredential singleton."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, AccessCredential)

    async def get_for_user(self, user_id: str) -> AccessCredential | None:
        return await self.get_by_id(user_id)

    async def store_link(self, user_id: str, access_token: str, item_id: str) -> AccessCredential:
        """Stage the credential from a token exchange.

        Re-linking the same item keeps the cursor; a different item starts
        over from the beginning and bumps ``sync_version`` so a sync still
        running against the old item loses its compare-and-swap.
        """
        existing = await self.get_for_user(user_id)
        data: dict = {"access_token": access_token, "item_id": item_id}
        if existing is not None and existing.item_id != item_id:
            data["cursor"] = None
            data["sync_version"] = existing.sync_version + 1
        credential, _ = await self.upsert_merge(user_id, data)
        return credential

    async def advance_cursor(
        self, user_id: str, expected_version: int, cursor: str | None
    ) -> bool:
        """Stage the new cursor if nobody committed a sync since we read it.

        Returns:
            False when ``sync_version`` no longer matches (lost race)
        """
        result = await self.db.execute(
            update(AccessCredential)
            .where(
                AccessCredential.user_id == user_id,
                AccessCredential.sync_version == expected_version,
            )
            .values(
                cursor=cursor,
                last_sync_at=datetime.now(timezone.utc),
                sync_version=expected_version + 1,
            )
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) == 1
