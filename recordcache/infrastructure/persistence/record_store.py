"""Bulk-read store over a SQLAlchemy model: the cache's only database read."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recordcache.core.config import get_settings
from recordcache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlAlchemyRecordStore:
    """Loads every row of one model into detached objects.

    The rows are read by a short-lived session bound to the caller's
    connection, so they see the caller's transaction but never enter the
    caller's identity map. Objects the caller already holds stay attached.
    Closing the loading session detaches the rows; relationships that were
    not eagerly loaded are unavailable on them.
    """

    def __init__(self, db: AsyncSession, model: type[Any]) -> None:
        self.db = db
        self.model = model

    async def fetch_all(self) -> list[Any]:
        """Return every row of the model, unfiltered and detached."""
        connection = await self.db.connection()
        async with AsyncSession(
            bind=connection, expire_on_commit=False, autoflush=False
        ) as loader:
            result = await loader.execute(select(self.model))
            records = list(result.scalars().all())
        limit = get_settings().record_cache_max_records
        if len(records) > limit:
            logger.warning(
                "Cached record type %s loaded %d rows (threshold %d); "
                "the whole table is held in memory",
                self.model.__name__,
                len(records),
                limit,
            )
        return records
