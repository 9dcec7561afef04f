"""Interfaces (protocols) consumed by the record cache."""

from recordcache.application.interfaces.stores import KeyExtractor, RecordStore

__all__ = ["KeyExtractor", "RecordStore"]
