"""Bank account mirrored from the provider."""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from budgetsync.models.base import Base, TimestampMixin


class Account(TimestampMixin, Base):
    """Account plus the institution metadata it belongs to."""

    __tablename__ = "accounts"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    account_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    official_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mask: Mapped[str | None] = mapped_column(String(16), nullable=True)
    subtype: Mapped[str | None] = mapped_column(String(64), nullable=True)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    institution_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    institution_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    institution_logo: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Account(account_id={self.account_id}, name={self.name})>"
