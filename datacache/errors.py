"""Exceptions and error reporting for the data cache.

Cache failures never reach callers. Every operation catches storage and
serialization problems at its boundary, wraps them in one of the errors
below and hands them to an ``ErrorReporter``.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        context: Additional context information about the error
    """

    def __init__(
        self, message: str, error_code: str, context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    @property
    def operation(self) -> Optional[str]:
        return self.context.get("operation")

    @property
    def key(self) -> Optional[str]:
        return self.context.get("key")


class StorageUnavailable(CacheError):
    """Raised when the backing database cannot be opened."""

    def __init__(self, db_path: str, reason: str) -> None:
        super().__init__(
            message=f"Storage at '{db_path}' is unavailable: {reason}",
            error_code="storage_unavailable",
            context={"db_path": db_path},
        )
        self.db_path = db_path
        self.reason = reason


class TransactionFailed(CacheError):
    """Raised when a read or write transaction against the store fails."""

    def __init__(self, reason: str, operation: Optional[str] = None, key: Optional[str] = None) -> None:
        context: dict[str, Any] = {}
        if operation:
            context["operation"] = operation
        if key is not None:
            context["key"] = key
        super().__init__(
            message=f"Transaction failed: {reason}",
            error_code="transaction_failed",
            context=context,
        )
        self.reason = reason


class SerializationFailed(CacheError):
    """Raised when an object cannot be converted to or from JSON."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"JSON conversion failed: {reason}",
            error_code="serialization_failed",
        )
        self.reason = reason


ErrorReporter = Callable[[CacheError], None]


def log_error_reporter(error: CacheError) -> None:
    """Default reporter: log the failure and carry on."""
    if error.key is not None:
        logger.error(f"DataCache Error: {error.operation} failed for key '{error.key}': {error.message}")
    else:
        logger.error(f"DataCache Error: {error.operation} failed: {error.message}")
