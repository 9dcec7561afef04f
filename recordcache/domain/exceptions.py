"""Domain exceptions for recordcache.

Every error the cache and its repositories raise derives from
RecordCacheException so callers can handle them consistently. Lookup errors
are synchronous and never retried internally: the cache does not re-read the
store after construction.
"""

from typing import Any


class RecordCacheException(Exception):
    """Base exception for all recordcache errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. resource_type, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class RecordNotFoundException(RecordCacheException):
    """Raised when an identifier is absent from a populated cache.

    A miss means the record genuinely does not exist; callers should not fall
    back to the database.
    """

    def __init__(self, resource_type: str, resource_id: Any) -> None:
        """Initialize with the cached type name and the missing identifier.

        Args:
            resource_type: Name of the cached model type (e.g. 'TaxRate').
            resource_id: The identifier that was not found.
        """
        super().__init__(
            f"Couldn't find {resource_type} with ID={resource_id}",
            "RECORD_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidQueryException(RecordCacheException):
    """Raised when a multi-key lookup has no usable identifiers (caller defect)."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(
            f"Couldn't find {resource_type} without an ID",
            "INVALID_QUERY",
            {"resource_type": resource_type},
        )


class ReadOnlyRecordException(RecordCacheException):
    """Raised when a write is attempted against a cached (read-only) model type."""

    def __init__(self, resource_type: str, operation: str) -> None:
        """Initialize with the cached type and the refused operation.

        Args:
            resource_type: Name of the cached model type.
            operation: The write that was refused (e.g. 'create', 'flush').
        """
        super().__init__(
            f"{resource_type} is a cached record type and is read-only; refused {operation}",
            "READ_ONLY_RECORD",
            {"resource_type": resource_type, "operation": operation},
        )


class CacheNotDeclaredException(RecordCacheException):
    """Raised when a cache is requested for a model type that was never declared."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(
            f"{resource_type} is not declared as a cached record type",
            "CACHE_NOT_DECLARED",
            {"resource_type": resource_type},
        )


class SqlNotConfiguredException(RecordCacheException):
    """Raised when a database session is requested but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
