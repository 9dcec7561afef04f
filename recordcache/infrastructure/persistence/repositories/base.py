"""Base repository: generic reads and writes against the database."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recordcache.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, get_by_ids, get_all, find_where and writes.

    Every method goes to the database. CachedRecordRepository overrides the
    key lookups and refuses the writes for cached types.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType], id_field: str = "id") -> None:
        self.db = db
        self.model = model
        self.id_field = id_field

    @property
    def _id_column(self) -> Any:
        return getattr(self.model, self.id_field)

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Return a single record by primary key, or None."""
        result = await self.db.execute(
            select(self.model).where(self._id_column == entity_id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, entity_ids: Sequence[Any]) -> list[ModelType]:
        """Return records whose primary key is in entity_ids (database order)."""
        if not entity_ids:
            return []
        result = await self.db.execute(
            select(self.model).where(self._id_column.in_(list(entity_ids)))
        )
        return list(result.scalars().all())

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Return records with pagination."""
        result = await self.db.execute(select(self.model).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def find_where(self, *conditions: Any) -> list[ModelType]:
        """Return records matching arbitrary SQLAlchemy conditions (all rows if none)."""
        stmt = select(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Merge and flush an existing record."""
        obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self.db.flush()
