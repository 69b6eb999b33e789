"""Spending category with its matching keywords."""
from uuid import UUID

from sqlalchemy import JSON, BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetsync.models.base import BaseModel


class Category(BaseModel):
    """User-defined category.

    ``position`` fixes the enumeration order used by first-match-wins
    keyword matching.
    """

    __tablename__ = "categories"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    budget_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("budgets.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("ix_categories_user_id_position", "user_id", "position"),)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
