"""Session guard refusing to flush objects of cached record types."""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session

from recordcache.domain.exceptions import ReadOnlyRecordException
from recordcache.infrastructure.cache.registry import RecordCacheRegistry, default_registry
from recordcache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _check_flush(registry: RecordCacheRegistry, session: Session) -> None:
    for operation, objects in (
        ("insert", session.new),
        ("update", session.dirty),
        ("delete", session.deleted),
    ):
        for obj in objects:
            if registry.is_readonly(obj):
                type_name = type(obj).__name__
                logger.warning("Refused %s of cached record %s", operation, type_name)
                raise ReadOnlyRecordException(type_name, operation)


def install_readonly_guard(
    target: Any = Session,
    registry: RecordCacheRegistry | None = None,
) -> None:
    """Register a before_flush listener on target (a Session class or sessionmaker).

    AsyncSession flushes through its sync Session, so the default target covers
    both. Flushing new, dirty or deleted objects of a cached type raises
    ReadOnlyRecordException.
    """
    registry = registry or default_registry

    def before_flush(session: Session, flush_context: Any, instances: Any) -> None:
        _check_flush(registry, session)

    event.listen(target, "before_flush", before_flush)
