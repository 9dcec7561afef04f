"""Pytest configuration and fixtures for recordcache.

Unit tests run against stub stores and mocked sessions. Postgres-backed tests
use db_session and are marked requires_db; run without a database via:
pytest -m 'not requires_db'.
"""

from dataclasses import dataclass
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from recordcache.core.config import get_settings
from recordcache.infrastructure.cache.registry import RecordCacheRegistry
from recordcache.infrastructure.persistence import database, record_store


@dataclass(frozen=True)
class Record:
    """Plain immutable record for cache tests."""

    id: Any
    name: str


class StubStore:
    """Backing store stub that fails if it is read more than once.

    fail_times makes the first N reads raise fail_with, to exercise failed
    and retried construction.
    """

    def __init__(
        self,
        records: list[Any],
        *,
        fail_with: Exception | None = None,
        fail_times: int = 0,
    ) -> None:
        self.records = list(records)
        self.fail_with = fail_with
        self.fail_times = fail_times
        self.calls = 0
        self.successful_reads = 0

    async def fetch_all(self) -> list[Any]:
        self.calls += 1
        if self.calls <= self.fail_times and self.fail_with is not None:
            raise self.fail_with
        if self.successful_reads:
            raise AssertionError("backing store queried after the cache was built")
        self.successful_reads += 1
        return list(self.records)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Re-read settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def greek_records() -> list[Record]:
    return [Record(1, "Alpha"), Record(2, "Beta"), Record(3, "Gamma")]


@pytest.fixture
def greek_store(greek_records: list[Record]) -> StubStore:
    return StubStore(greek_records)


@pytest.fixture
def registry() -> RecordCacheRegistry:
    """Fresh registry per test; built caches never outlive the test."""
    return RecordCacheRegistry()


@pytest.fixture
def loader_session(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the session SqlAlchemyRecordStore opens for its bulk read.

    Set loader_session.rows to the table contents. loader_session.factory is
    the patched AsyncSession class, to assert on the connection it was bound to.
    """
    loader = MagicMock()
    loader.rows = []
    result = MagicMock()
    result.scalars.return_value.all.side_effect = lambda: list(loader.rows)
    loader.execute = AsyncMock(return_value=result)
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=loader)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    loader.factory = factory
    monkeypatch.setattr(record_store, "AsyncSession", factory)
    return loader


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for integration tests. Rolls back after test.

    Requires DATABASE_URL (postgresql+asyncpg://...). Skips when it is not set.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL=postgresql+asyncpg://...")
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
