"""
Cache interface - contract for the expiring string cache.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel


class CacheStats(BaseModel):
    """Statistics about cache performance"""
    hits: int = 0
    misses: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate"""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class IStringCache(ABC):
    """
    Persistent string cache with per-entry expiration.

    Implementations never raise on storage problems; they report them and
    return an empty result instead.
    """

    @abstractmethod
    def save(self, key: str, content: str, ttl_seconds: Optional[float] = None) -> None:
        """
        Store or overwrite the content for a key.

        Args:
            key: Cache key
            content: String payload
            ttl_seconds: Time to live in seconds (None = configured default)
        """
        pass

    @abstractmethod
    def lookup(self, key: str) -> Optional[str]:
        """
        Retrieve fresh content for a key.

        Args:
            key: Cache key

        Returns:
            Stored content, or None if missing, expired or disabled
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: Cache key to remove

        Returns:
            True if an entry was removed
        """
        pass

    @abstractmethod
    def clear_all(self) -> None:
        """Remove every entry, fresh or expired."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of stored entries, including expired ones."""
        pass

    @abstractmethod
    def all_keys(self) -> List[str]:
        """Every stored key, in no particular order."""
        pass

    @abstractmethod
    def get_stats(self) -> CacheStats:
        """
        Get cache performance statistics.

        Returns:
            CacheStats with hits, misses and size
        """
        pass
