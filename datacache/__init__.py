"""Persistent key/value string cache with per-entry expiration."""

from .config import Settings, CacheConfig, ONE_DAY_SECONDS
from .errors import (
    CacheError,
    StorageUnavailable,
    TransactionFailed,
    SerializationFailed,
    ErrorReporter,
    log_error_reporter,
)
from .interfaces import IStringCache, CacheStats
from .models import CacheEntry, CacheEntryORM
from .services import DatabaseService
from .serialization import DateStrategy, to_json, from_json
from .caching import DataCache

__all__ = [
    # Configuration
    "Settings",
    "CacheConfig",
    "ONE_DAY_SECONDS",
    # Errors
    "CacheError",
    "StorageUnavailable",
    "TransactionFailed",
    "SerializationFailed",
    "ErrorReporter",
    "log_error_reporter",
    # Interfaces
    "IStringCache",
    "CacheStats",
    # Models
    "CacheEntry",
    "CacheEntryORM",
    # Storage
    "DatabaseService",
    # Serialization
    "DateStrategy",
    "to_json",
    "from_json",
    # Cache
    "DataCache",
]
