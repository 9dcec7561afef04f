"""Repository that answers key lookups for cached record types from memory.

find(*ids) is the capability check at the call site: when the model is a
declared cached type (and caching is enabled) the lookup goes to its
RecordCache, built from the database on first use; otherwise it runs the
normal query. get_by_id and get_by_ids follow the same rule. Condition queries
(find_where, get_all) always hit the database.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from recordcache.core.config import get_settings
from recordcache.domain.exceptions import (
    InvalidQueryException,
    ReadOnlyRecordException,
    RecordNotFoundException,
)
from recordcache.infrastructure.cache.record_cache import RecordCache, is_id_list, normalize_ids
from recordcache.infrastructure.cache.registry import RecordCacheRegistry, default_registry
from recordcache.infrastructure.persistence.database import Base
from recordcache.infrastructure.persistence.record_store import SqlAlchemyRecordStore
from recordcache.infrastructure.persistence.repositories.base import BaseRepository
from recordcache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class CachedRecordRepository(BaseRepository[ModelType]):
    """BaseRepository whose key lookups use the per-type record cache."""

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        registry: RecordCacheRegistry | None = None,
    ) -> None:
        self.registry = registry or default_registry
        id_field = (
            self.registry.declaration_for(model).id_field
            if self.registry.is_declared(model)
            else get_settings().record_cache_default_id_field
        )
        super().__init__(db, model, id_field=id_field)

    @property
    def uses_cache(self) -> bool:
        return get_settings().record_cache_enabled and self.registry.is_declared(self.model)

    async def ensure_loaded(self) -> RecordCache:
        """Return this model's cache, loading it through this session on first use."""
        return await self.registry.get_or_load(
            self.model, SqlAlchemyRecordStore(self.db, self.model)
        )

    async def find(self, *ids: Any, **options: Any) -> Any:
        """Find records by identifier.

        find(1) returns one record, find(1, 2) and find([1, 2]) return lists,
        find([1]) returns a one-element list and find([]) returns []. Missing
        identifiers raise RecordNotFoundException.
        """
        if self.uses_cache:
            cache = await self.ensure_loaded()
            return cache.fetch_many(list(ids), options)
        return await self._find_uncached(list(ids))

    async def _find_uncached(self, ids: list[Any]) -> Any:
        if len(ids) == 1 and is_id_list(ids[0]) and not ids[0]:
            return []
        record_ids, expects_list = normalize_ids(ids)
        type_name = self.model.__name__
        if not record_ids:
            raise InvalidQueryException(type_name)
        rows = {getattr(r, self.id_field): r for r in await self.get_by_ids(record_ids)}
        missing = [i for i in record_ids if i not in rows]
        if missing:
            raise RecordNotFoundException(type_name, missing[0])
        if len(record_ids) == 1 and not expects_list:
            return rows[record_ids[0]]
        return [rows[i] for i in record_ids]

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Return a single record by primary key, or None."""
        if not self.uses_cache:
            return await super().get_by_id(entity_id)
        cache = await self.ensure_loaded()
        try:
            return cache.fetch_one(entity_id)
        except RecordNotFoundException:
            return None

    async def get_by_ids(self, entity_ids: Sequence[Any]) -> list[ModelType]:
        """Return the records whose primary key is in entity_ids.

        From the cache the result follows entity_ids order and skips unknown
        identifiers; from the database it follows database order.
        """
        if not self.uses_cache:
            return await super().get_by_ids(entity_ids)
        cache = await self.ensure_loaded()
        return [cache.fetch_one(i) for i in dict.fromkeys(entity_ids) if i in cache]

    async def list_cached(self) -> tuple[Any, ...]:
        """Return every record of the model.

        Served from the cache when it is in use, otherwise read from the
        database without building a cache.
        """
        if not self.uses_cache:
            logger.debug(
                "Record cache not in use for %s; listing from database", self.model.__name__
            )
            return tuple(await self.find_where())
        cache = await self.ensure_loaded()
        return cache.list_all()

    def _refuse_write(self, operation: str) -> None:
        if self.registry.is_declared(self.model):
            raise ReadOnlyRecordException(self.model.__name__, operation)

    async def create(self, obj: ModelType) -> ModelType:
        self._refuse_write("create")
        return await super().create(obj)

    async def update(self, obj: ModelType) -> ModelType:
        self._refuse_write("update")
        return await super().update(obj)

    async def delete(self, obj: ModelType) -> None:
        self._refuse_write("delete")
        await super().delete(obj)
