"""
Interfaces for the cache layer.
"""

from .cache import IStringCache, CacheStats

__all__ = [
    "IStringCache",
    "CacheStats",
]
