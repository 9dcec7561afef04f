"""Read-only identity-map cache of every record of one type.

Suitable for tables with a small number of rows that change very rarely. The
whole table is loaded into memory once; there is no invalidation, eviction or
refresh, so seeing new data means restarting the process. Change such tables
through migrations shipped with a deployment.

The cache maps each record's identifier to the record itself. It reduces
database round-trips; it does not promise that an identifier maps to the same
instance across cache rebuilds.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any

from recordcache.application.interfaces import KeyExtractor, RecordStore
from recordcache.domain.exceptions import (
    InvalidQueryException,
    RecordNotFoundException,
)
from recordcache.shared.telemetry.logging import get_logger
from recordcache.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)


def is_id_list(value: Any) -> bool:
    """Return True if value is a sequence of identifiers rather than one identifier.

    str and bytes are identifiers, not sequences of them.
    """
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def normalize_ids(ids: Any) -> tuple[list[Hashable], bool]:
    """Normalize a find-by-ids argument list.

    Accepts a bare identifier, a flat sequence of identifiers, or a sequence
    wrapping one sequence (the shape association loaders pass). Flattens one
    level, drops None and de-duplicates keeping first occurrence.

    Args:
        ids: Arguments as the caller passed them.

    Returns:
        (identifiers, expects_list). expects_list is True when the first
        argument was itself a sequence, so a single hit must be wrapped.
    """
    if not is_id_list(ids):
        ids = [ids]
    expects_list = bool(ids) and is_id_list(ids[0])
    flat: list[Any] = []
    for item in ids:
        if is_id_list(item):
            flat.extend(item)
        else:
            flat.append(item)
    unique = dict.fromkeys(i for i in flat if i is not None)
    return list(unique), expects_list


class RecordCache:
    """Identity map from identifier to record, built once and never mutated.

    Lookups are pure in-memory calls and safe to share between tasks and
    threads. Every record obtained from the cache is read-only (see readonly).
    """

    readonly = True

    def __init__(
        self,
        type_name: str,
        records: Iterable[Any],
        key: KeyExtractor,
    ) -> None:
        """Build the mapping from already-loaded records.

        Duplicate identifiers are not validated; the last record wins.

        Args:
            type_name: Name of the cached type, used in error messages.
            records: Every record of the type.
            key: Extracts a record's identifier.
        """
        self.type_name = type_name
        cache: dict[Hashable, Any] = {}
        for record in records:
            cache[key(record)] = record
        self._cache = cache
        self._records = tuple(cache.values())

    @classmethod
    @traced("record_cache.load")
    async def load(
        cls,
        store: RecordStore,
        key: KeyExtractor,
        type_name: str,
    ) -> RecordCache:
        """Read the whole store once and return a ready cache.

        A failure in fetch_all() propagates and no cache is returned.
        """
        logger.info("Loading record cache for %s", type_name)
        try:
            records = await store.fetch_all()
        except Exception:
            logger.exception("Record cache load failed for %s", type_name)
            raise
        cache = cls(type_name, records, key)
        add_span_attributes(type_name=type_name, count=len(cache))
        logger.info("Record cache for %s ready: %d records", type_name, len(cache))
        return cache

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._cache

    def fetch_one(self, record_id: Hashable) -> Any:
        """Return the record with this identifier.

        Raises:
            RecordNotFoundException: No record has this identifier.
        """
        try:
            result = self._cache[record_id]
        except (KeyError, TypeError):
            logger.debug("Record cache MISS: %s id=%r", self.type_name, record_id)
            raise RecordNotFoundException(self.type_name, record_id) from None
        logger.debug("Record cache HIT: %s id=%r", self.type_name, record_id)
        return result

    def fetch_many(
        self,
        ids: Any,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Look up records by the identifiers a find call received.

        A single empty list yields []. A single identifier yields the bare
        record, or a one-element list when the caller passed a list. More
        identifiers yield records in normalized order. options is accepted
        for call compatibility and not used.

        Raises:
            InvalidQueryException: No usable identifiers were supplied.
            RecordNotFoundException: Any identifier is missing; no partial
                result is returned.
        """
        if is_id_list(ids) and len(ids) == 1 and is_id_list(ids[0]) and not ids[0]:
            return []
        record_ids, expects_list = normalize_ids(ids)
        if not record_ids:
            raise InvalidQueryException(self.type_name)
        if len(record_ids) == 1:
            result = self.fetch_one(record_ids[0])
            return [result] if expects_list else result
        return self.fetch_some(record_ids)

    def fetch_some(self, record_ids: Sequence[Hashable]) -> list[Any]:
        """Return records for already-normalized identifiers, in order."""
        return [self.fetch_one(record_id) for record_id in record_ids]

    def list_all(self) -> tuple[Any, ...]:
        """Return every cached record. Order is unspecified."""
        return self._records
