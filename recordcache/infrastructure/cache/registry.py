"""Registry of cached record types and their one-time-built caches.

Declaring a type records its options; the cache itself is built on first use
from whatever store the caller supplies, exactly once per type even when
several tasks or threads ask at the same time. Built caches live until the
process exits.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, TypeVar

from recordcache.application.interfaces import KeyExtractor, RecordStore
from recordcache.core.config import get_settings
from recordcache.domain.exceptions import CacheNotDeclaredException
from recordcache.infrastructure.cache.record_cache import RecordCache
from recordcache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=type)


@dataclass
class CachedRecordDeclaration:
    """Options for one cached type and, once built, its cache."""

    model: type
    id_field: str
    key: KeyExtractor
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    cache: RecordCache | None = field(default=None, repr=False)

    @property
    def type_name(self) -> str:
        return self.model.__name__


class RecordCacheRegistry:
    """Maps model types to their cache declarations.

    get_or_load() is the only path that builds a cache. A failed load leaves
    the type unbuilt so a later call can retry; no partial cache is stored.
    """

    def __init__(self) -> None:
        self._declarations: dict[type, CachedRecordDeclaration] = {}

    def declare(
        self,
        model: type,
        id_field: str | None = None,
        key: KeyExtractor | None = None,
    ) -> CachedRecordDeclaration:
        """Declare model as a cached record type.

        Idempotent: a second declaration for the same model returns the first
        one unchanged.

        Args:
            model: The record type (usually a SQLAlchemy model class).
            id_field: Primary-key attribute; defaults to the configured
                record_cache_default_id_field ('id').
            key: Custom key extractor; defaults to attrgetter(id_field).
        """
        existing = self._declarations.get(model)
        if existing is not None:
            return existing
        id_field = id_field or get_settings().record_cache_default_id_field
        declaration = CachedRecordDeclaration(
            model=model,
            id_field=id_field,
            key=key or attrgetter(id_field),
        )
        self._declarations[model] = declaration
        logger.debug("Declared cached record type %s (id_field=%s)", model.__name__, id_field)
        return declaration

    def is_declared(self, model: type) -> bool:
        return model in self._declarations

    def is_readonly(self, obj: Any) -> bool:
        """Return True if obj is an instance of a cached (read-only) type."""
        return any(isinstance(obj, model) for model in self._declarations)

    def declaration_for(self, model: type) -> CachedRecordDeclaration:
        try:
            return self._declarations[model]
        except KeyError:
            raise CacheNotDeclaredException(model.__name__) from None

    def get_loaded(self, model: type) -> RecordCache | None:
        """Return the built cache for model, or None if not built yet."""
        declaration = self._declarations.get(model)
        return declaration.cache if declaration else None

    async def get_or_load(self, model: type, store: RecordStore) -> RecordCache:
        """Return the cache for model, building it from store on first use.

        Concurrent first calls share one bulk load; the others wait on the
        per-type lock and receive the built cache. The lock is a thread lock,
        so callers on different event loops (one per thread) are serialized
        too; waiting happens in a worker thread and never blocks a loop.

        Raises:
            CacheNotDeclaredException: model was never declared.
            Exception: whatever store.fetch_all() raised during the build.
        """
        declaration = self.declaration_for(model)
        if declaration.cache is not None:
            return declaration.cache
        await _acquire(declaration.lock)
        try:
            if declaration.cache is None:
                declaration.cache = await RecordCache.load(
                    store, declaration.key, declaration.type_name
                )
        finally:
            declaration.lock.release()
        return declaration.cache


async def _acquire(lock: threading.Lock) -> None:
    """Acquire a thread lock from async code without blocking the event loop.

    If the waiting task is cancelled, the lock is released as soon as the
    worker thread obtains it.
    """
    if lock.acquire(blocking=False):
        return
    pending = asyncio.ensure_future(asyncio.to_thread(lock.acquire))
    try:
        await asyncio.shield(pending)
    except asyncio.CancelledError:
        pending.add_done_callback(lambda _: lock.release())
        raise


default_registry = RecordCacheRegistry()


def cached_record(
    id_field: str | None = None,
    *,
    registry: RecordCacheRegistry | None = None,
) -> Callable[[T], T]:
    """Class decorator declaring a model as a cached record type.

    Example:
        @cached_record(id_field="code")
        class Currency(Base):
            ...
    """

    def decorator(model: T) -> T:
        (registry or default_registry).declare(model, id_field=id_field)
        return model

    return decorator
