"""Application layer: ports the cache consumes (DIP).

Infrastructure implements them (SQLAlchemy store); tests supply stubs.
"""

from recordcache.application.interfaces import KeyExtractor, RecordStore

__all__ = ["KeyExtractor", "RecordStore"]
