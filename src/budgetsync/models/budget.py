"""Budget model. A user owns at most one budget."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from budgetsync.models.base import BaseModel


class Budget(BaseModel):
    """Named budget; its total is the sum of its categories' amounts."""

    __tablename__ = "budgets"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Budget(id={self.id}, name={self.name})>"
