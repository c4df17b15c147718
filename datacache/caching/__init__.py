"""
Expiring string cache backed by SQLite.
"""

from .data_cache import DataCache, utcnow

__all__ = [
    "DataCache",
    "utcnow",
]
