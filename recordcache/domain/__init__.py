"""Domain layer: exceptions raised by the cache and its integration glue.

No dependencies on infrastructure. Used by the cache, registry and
repositories.
"""

from recordcache.domain.exceptions import (
    CacheNotDeclaredException,
    InvalidQueryException,
    ReadOnlyRecordException,
    RecordCacheException,
    RecordNotFoundException,
    SqlNotConfiguredException,
)

__all__ = [
    "CacheNotDeclaredException",
    "InvalidQueryException",
    "ReadOnlyRecordException",
    "RecordCacheException",
    "RecordNotFoundException",
    "SqlNotConfiguredException",
]
