"""Persistence: async engine and session, the bulk-read store, the read-only flush guard."""

from recordcache.infrastructure.persistence.database import Base, get_db
from recordcache.infrastructure.persistence.readonly_guard import install_readonly_guard
from recordcache.infrastructure.persistence.record_store import SqlAlchemyRecordStore

__all__ = ["Base", "SqlAlchemyRecordStore", "get_db", "install_readonly_guard"]
