"""Per-user transaction provider credential and sync cursor."""
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from budgetsync.models.base import Base, TimestampMixin


class AccessCredential(TimestampMixin, Base):
    """Provider access token plus the cursor of the last merged sync page.

    ``cursor`` only moves forward, and only in the same commit that stores
    the deltas it covers. ``sync_version`` is bumped by every committed sync
    and by a re-link to a different item, and is compared-and-swapped at
    commit time.
    """

    __tablename__ = "access_credentials"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    item_id: Mapped[str] = mapped_column(String(128), nullable=False)
    cursor: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    last_sync_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    sync_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        # Never include the access token.
        return f"<AccessCredential(user_id={self.user_id}, item_id={self.item_id})>"
