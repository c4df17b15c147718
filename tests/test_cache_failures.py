"""
Tests for storage failure handling in the data cache.

Failures must never escape the cache; they go to the error reporter and
every operation returns its empty result.
"""

import logging
import pytest

from datacache.caching.data_cache import DataCache
from datacache.config import CacheConfig
from datacache.errors import StorageUnavailable, TransactionFailed
from datacache.models.cache_orm import Base
from datacache.services.database_service import DatabaseService


@pytest.fixture
def reported():
    return []


@pytest.fixture
def unavailable_cache(tmp_path, reported):
    """Cache whose database path sits under a regular file."""
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("")
    database = DatabaseService(db_path=str(blocker / "cache.db"))
    return DataCache(database, CacheConfig(), error_reporter=reported.append)


@pytest.fixture
def broken_cache(reported):
    """Cache whose table has been dropped after connecting."""
    database = DatabaseService(db_path=":memory:")
    database.connect()
    Base.metadata.drop_all(database.engine)
    yield DataCache(database, CacheConfig(), error_reporter=reported.append)
    database.disconnect()


def test_unavailable_storage_degrades_to_empty_results(unavailable_cache, reported):
    """Test that every operation returns its 'nothing happened' result."""
    unavailable_cache.save("a", "x")

    assert unavailable_cache.lookup("a") is None
    assert unavailable_cache.lookup_entry("a") is None
    assert unavailable_cache.remove("a") is False
    assert unavailable_cache.count() == 0
    assert unavailable_cache.all_keys() == []
    unavailable_cache.clear_all()

    assert len(reported) == 7
    assert all(isinstance(error, StorageUnavailable) for error in reported)
    assert all(error.error_code == "storage_unavailable" for error in reported)


def test_unavailable_storage_reports_operation_and_key(unavailable_cache, reported):
    unavailable_cache.save("user:42", "x")

    error = reported[0]
    assert error.operation == "save"
    assert error.key == "user:42"
    assert isinstance(error.__cause__, OSError)


def test_failed_transactions_degrade_to_empty_results(broken_cache, reported):
    """Test that SQL errors are reported as TransactionFailed."""
    broken_cache.save("a", "x")

    assert broken_cache.lookup("a") is None
    assert broken_cache.remove("a") is False
    assert broken_cache.count() == 0
    assert broken_cache.all_keys() == []
    broken_cache.clear_all()

    assert [error.operation for error in reported] == [
        "save", "lookup", "remove", "count", "all_keys", "clear_all"
    ]
    assert all(isinstance(error, TransactionFailed) for error in reported)


def test_recovers_once_storage_is_back(reported):
    """Test that a failure does not poison later operations."""
    database = DatabaseService(db_path=":memory:")
    database.connect()
    cache = DataCache(database, CacheConfig(), error_reporter=reported.append)

    Base.metadata.drop_all(database.engine)
    cache.save("a", "x")
    assert len(reported) == 1

    Base.metadata.create_all(database.engine)
    cache.save("a", "x")
    assert cache.lookup("a") == "x"
    assert len(reported) == 1

    database.disconnect()


def test_reporter_exceptions_are_contained(broken_cache):
    """Test that a crashing reporter does not surface to the caller."""
    def explode(error):
        raise RuntimeError("reporter is broken")

    cache = DataCache(broken_cache.database, CacheConfig(), error_reporter=explode)

    assert cache.count() == 0
    assert cache.lookup("a") is None


def test_default_reporter_logs(broken_cache, caplog):
    """Test that failures are logged when no reporter is injected."""
    cache = DataCache(broken_cache.database, CacheConfig())

    with caplog.at_level(logging.ERROR, logger="datacache.errors"):
        assert cache.remove("user:42") is False

    assert "DataCache Error: remove failed for key 'user:42'" in caplog.text
