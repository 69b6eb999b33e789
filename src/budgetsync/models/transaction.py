"""Transaction model keyed by the provider's transaction id."""
from uuid import UUID

from sqlalchemy import BigInteger, Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetsync.models.base import Base, TimestampMixin


class Transaction(TimestampMixin, Base):
    """Bank transaction mirrored from the provider.

    ``amount`` is in minor units (cents); positive is money leaving the
    account. ``category_name`` caches the assigned category's name and is
    rewritten by reconciliation.
    """

    __tablename__ = "transactions"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    account_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    name: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    merchant_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    pending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    provider_category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    category_id: Mapped[UUID | None] = mapped_column(nullable=True)
    category_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_transactions_user_id_date", "user_id", "date"),
        Index("ix_transactions_user_id_account_id", "user_id", "account_id"),
        Index("ix_transactions_user_id_name", "user_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, name={self.name}, amount={self.amount})>"
