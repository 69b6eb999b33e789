"""Base repository with the storage operations every store shares.

Methods that stage writes (``add``, ``upsert_merge``, ``remove``) only flush;
callers group them with ``budgetsync.db.session.atomic`` so they commit as
one batch. ``create`` and ``delete`` commit immediately.
"""
from typing import Any, Generic, Type, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository providing storage operations for any model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _primary_key_names(self) -> list[str]:
        return [column.key for column in sa_inspect(self.model).primary_key]

    async def get_by_id(self, id: Any) -> T | None:
        """Get a single record by primary key (a tuple for composite keys)."""
        return await self.db.get(self.model, id)

    async def find_by(self, user_id: str, field: str, value: Any) -> list[T]:
        """Get a user's records whose ``field`` equals ``value``."""
        column = getattr(self.model, field)
        result = await self.db.execute(
            select(self.model).where(self.model.user_id == user_id, column == value)
        )
        return list(result.scalars().all())

    async def add(self, obj: T) -> T:
        """Stage a new record."""
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def upsert_merge(self, id: Any, data: dict[str, Any]) -> tuple[T, bool]:
        """Stage an insert, or merge ``data`` into the existing record.

        Fields absent from ``data`` keep their stored values.

        Returns:
            The record and whether it was newly created
        """
        obj = await self.get_by_id(id)
        if obj is None:
            key = id if isinstance(id, tuple) else (id,)
            values = dict(zip(self._primary_key_names(), key))
            values.update(data)
            obj = self.model(**values)
            self.db.add(obj)
            await self.db.flush()
            return obj, True

        for field, value in data.items():
            if hasattr(obj, field):
                setattr(obj, field, value)
        await self.db.flush()
        return obj, False

    async def remove(self, obj: T) -> None:
        """Stage deletion of a record."""
        await self.db.delete(obj)
        await self.db.flush()

    async def create(self, obj: T) -> T:
        """Create a new record and commit."""
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: Any) -> bool:
        """Delete a record by primary key and commit."""
        obj = await self.get_by_id(id)
        if not obj:
            return False

        await self.db.delete(obj)
        await self.db.commit()
        return True
