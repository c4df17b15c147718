from .cache_entry import CacheEntry
from .cache_orm import CacheEntryORM, Base
from .converters import orm_to_pydantic

__all__ = [
    "CacheEntry",
    "CacheEntryORM",
    "Base",
    "orm_to_pydantic",
]
