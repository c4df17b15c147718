"""Utilities to convert between SQLAlchemy ORM and Pydantic models"""
from datacache.models.cache_entry import CacheEntry
from datacache.models.cache_orm import CacheEntryORM


def orm_to_pydantic(entry_orm: CacheEntryORM) -> CacheEntry:
    """
    Convert SQLAlchemy ORM CacheEntryORM to Pydantic CacheEntry

    The returned snapshot stays valid after the session is closed.

    Args:
        entry_orm: SQLAlchemy ORM model instance

    Returns:
        Pydantic CacheEntry instance
    """
    return CacheEntry(**entry_orm.to_dict())
