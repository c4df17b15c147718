from pydantic import BaseModel, Field
from datetime import datetime

from ..config import ONE_DAY_SECONDS


class CacheEntry(BaseModel):
    """Detached snapshot of a stored cache entry"""
    key: str = Field(..., description="Unique cache key")
    content: str = Field("", description="Cached payload, typically JSON")
    written_at: datetime = Field(..., description="Time of the last create or overwrite (UTC)")
    ttl_seconds: float = Field(ONE_DAY_SECONDS, ge=0, description="Time to live in seconds")

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed since the entry was last written."""
        return (now - self.written_at).total_seconds()

    def is_expired(self, now: datetime) -> bool:
        """An entry expires once its age reaches the TTL."""
        return self.age_seconds(now) >= self.ttl_seconds
