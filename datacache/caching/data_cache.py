"""
Expiring string cache persisted in SQLite.

Each entry stores its content, the time it was last written and its own
time-to-live. Expiration is checked lazily on lookup; stale rows stay in
the table until they are overwritten, removed or cleared.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from ..config import CacheConfig, Settings, settings as default_settings
from ..errors import CacheError, ErrorReporter, log_error_reporter
from ..interfaces.cache import CacheStats, IStringCache
from ..models.cache_entry import CacheEntry
from ..models.cache_orm import CacheEntryORM
from ..models.converters import orm_to_pydantic
from ..serialization import DateStrategy, to_json
from ..services.database_service import DatabaseService

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current time as naive UTC, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DataCache(IStringCache):
    """
    Persistent key/content cache with per-entry TTL.

    Storage failures are never raised to the caller. They are passed to the
    error reporter and the operation returns an empty result: a miss, False,
    0 or an empty list.
    """

    def __init__(
        self,
        database: DatabaseService,
        config: Optional[CacheConfig] = None,
        error_reporter: Optional[ErrorReporter] = None,
        clock: Optional[Clock] = None
    ):
        """
        Initialize the cache.

        Args:
            database: Database service holding the cache table
            config: Cache configuration (default: built from settings)
            error_reporter: Receives every swallowed failure (default: log it)
            clock: Returns the current naive UTC time (default: system clock)
        """
        self.database = database
        self.config = config or CacheConfig.from_settings()
        self._report = error_reporter or log_error_reporter
        self._clock = clock or utcnow

        # Statistics tracking
        self._stats = CacheStats()

    @classmethod
    def from_settings(
        cls,
        source: Optional[Settings] = None,
        error_reporter: Optional[ErrorReporter] = None
    ) -> "DataCache":
        source = source or default_settings
        database = DatabaseService(source.cache_db_path, echo=source.database_echo)
        return cls(database, CacheConfig.from_settings(source), error_reporter=error_reporter)

    @property
    def is_disabled(self) -> bool:
        return self.config.is_disabled

    @is_disabled.setter
    def is_disabled(self, value: bool) -> None:
        self.config.is_disabled = value

    # Save

    def save(self, key: str, content: str, ttl_seconds: Optional[float] = None) -> None:
        """
        Save or overwrite a string in the cache.

        An existing row is updated in place whether it is fresh or expired;
        its write time is reset to now.

        Args:
            key: Unique identifier for this cache entry
            content: The string to cache
            ttl_seconds: Optional custom expiration interval (default: one day)
        """
        self._check_key(key)
        ttl = self.config.default_ttl_seconds if ttl_seconds is None else float(ttl_seconds)
        if ttl < 0:
            raise ValueError(f"ttl_seconds must be non-negative, got {ttl_seconds}")

        try:
            with self.database.session_scope(operation="save", key=key) as session:
                now = self._clock()
                # Insert or overwrite in one statement
                table = CacheEntryORM.__table__
                stmt = sqlite_insert(table).values(
                    search_key=key, content=content, written_at=now, ttl_seconds=ttl
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[table.c.search_key],
                    set_={
                        "content": stmt.excluded.content,
                        "written_at": stmt.excluded.written_at,
                        "ttl_seconds": stmt.excluded.ttl_seconds,
                    },
                )
                session.execute(stmt)
            logger.debug(f"Cached '{key}' (ttl={ttl}s)")
        except CacheError as e:
            self._handle(e, "save", key)

    def save_object(
        self,
        key: str,
        obj: Any,
        ttl_seconds: Optional[float] = None,
        date_strategy: DateStrategy = DateStrategy.MILLISECONDS_SINCE_1970
    ) -> None:
        """
        Save an object by converting it to JSON first.

        If conversion fails nothing is written and the failure is reported.

        Args:
            key: Unique identifier for this cache entry
            obj: Pydantic model, dataclass or JSON-compatible value
            ttl_seconds: Optional custom expiration interval (default: one day)
            date_strategy: How datetimes inside ``obj`` are encoded
        """
        self._check_key(key)
        try:
            content = to_json(obj, date_strategy=date_strategy)
        except CacheError as e:
            self._handle(e, "save_object", key)
            return
        self.save(key, content, ttl_seconds)

    # Retrieve

    def lookup_entry(self, key: str) -> Optional[CacheEntry]:
        """
        Retrieve a cache entry if it exists and hasn't expired.

        Args:
            key: The unique identifier for the cache entry

        Returns:
            Snapshot of the entry, or None if disabled, missing or expired
        """
        if self.is_disabled:
            self._stats.misses += 1
            return None

        try:
            with self.database.session_scope(operation="lookup", key=key) as session:
                entry_orm = session.get(CacheEntryORM, key)
                entry = orm_to_pydantic(entry_orm) if entry_orm is not None else None
        except CacheError as e:
            self._handle(e, "lookup", key)
            entry = None

        if entry is None or entry.is_expired(self._clock()):
            self._stats.misses += 1
            return None

        self._stats.hits += 1
        return entry

    def lookup(self, key: str) -> Optional[str]:
        """
        Retrieve fresh content for a key.

        The content is returned as stored; decoding is up to the caller.
        """
        entry = self.lookup_entry(key)
        return entry.content if entry is not None else None

    # Cache Management

    def remove(self, key: str) -> bool:
        """
        Remove a specific cache entry by key.

        Returns:
            True if the entry was found and removed, False otherwise
        """
        try:
            with self.database.session_scope(operation="remove", key=key) as session:
                result = session.execute(
                    delete(CacheEntryORM).where(CacheEntryORM.key == key)
                )
                removed = result.rowcount > 0
        except CacheError as e:
            self._handle(e, "remove", key)
            return False

        if removed:
            logger.info(f"DataCache: removed cache entry for key '{key}'")
        return removed

    def clear_all(self) -> None:
        """Remove all cached entries from storage"""
        try:
            with self.database.session_scope(operation="clear_all") as session:
                removed = session.execute(delete(CacheEntryORM)).rowcount
        except CacheError as e:
            self._handle(e, "clear_all")
            return

        logger.info(f"DataCache: cleared all cache entries ({removed} items)")

    def count(self) -> int:
        """Total number of stored entries, expired ones included"""
        try:
            with self.database.session_scope(operation="count") as session:
                return session.scalar(select(func.count()).select_from(CacheEntryORM)) or 0
        except CacheError as e:
            self._handle(e, "count")
            return 0

    def all_keys(self) -> List[str]:
        """All stored keys, expired ones included. Order is not guaranteed."""
        try:
            with self.database.session_scope(operation="all_keys") as session:
                return list(session.scalars(select(CacheEntryORM.key)))
        except CacheError as e:
            self._handle(e, "all_keys")
            return []

    def get_stats(self) -> CacheStats:
        """
        Get lookup statistics for this instance.

        Returns:
            Copy of the counters with the current stored entry count as size
        """
        return self._stats.model_copy(update={"size": self.count()})

    # Internals

    @staticmethod
    def _check_key(key: str) -> None:
        if not key:
            raise ValueError("Cache key must be a non-empty string")

    def _handle(self, error: CacheError, operation: str, key: Optional[str] = None) -> None:
        error.context.setdefault("operation", operation)
        if key is not None:
            error.context.setdefault("key", key)
        try:
            self._report(error)
        except Exception:
            logger.exception(f"Error reporter failed while handling: {error.message}")
