"""Persistence repositories. Re-exports for dependency injection."""

from recordcache.infrastructure.persistence.repositories.base import BaseRepository
from recordcache.infrastructure.persistence.repositories.cached_repo import (
    CachedRecordRepository,
)

__all__ = ["BaseRepository", "CachedRecordRepository"]
