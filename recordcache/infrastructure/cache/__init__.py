"""Record cache: the identity map, the per-type registry and the declaration decorator."""

from recordcache.infrastructure.cache.record_cache import RecordCache, is_id_list, normalize_ids
from recordcache.infrastructure.cache.registry import (
    CachedRecordDeclaration,
    RecordCacheRegistry,
    cached_record,
    default_registry,
)

__all__ = [
    "CachedRecordDeclaration",
    "RecordCache",
    "RecordCacheRegistry",
    "cached_record",
    "default_registry",
    "is_id_list",
    "normalize_ids",
]
