"""recordcache: read-only, eagerly-populated identity-map cache for small tables.

A cached model type is loaded from the database once, on first use, and every
key lookup for it is answered from memory for the rest of the process.
"""

from recordcache.domain.exceptions import (
    CacheNotDeclaredException,
    InvalidQueryException,
    ReadOnlyRecordException,
    RecordCacheException,
    RecordNotFoundException,
)
from recordcache.infrastructure.cache import (
    RecordCache,
    RecordCacheRegistry,
    cached_record,
    default_registry,
)
from recordcache.infrastructure.persistence.repositories import (
    BaseRepository,
    CachedRecordRepository,
)

__version__ = "0.1.0"

__all__ = [
    "BaseRepository",
    "CacheNotDeclaredException",
    "CachedRecordRepository",
    "InvalidQueryException",
    "ReadOnlyRecordException",
    "RecordCache",
    "RecordCacheException",
    "RecordCacheRegistry",
    "RecordNotFoundException",
    "cached_record",
    "default_registry",
]
