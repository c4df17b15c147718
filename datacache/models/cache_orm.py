"""SQLAlchemy ORM model for the data cache table"""
from sqlalchemy import Column, String, Float, DateTime, Text
from sqlalchemy.orm import declarative_base

from ..config import ONE_DAY_SECONDS

Base = declarative_base()


class CacheEntryORM(Base):
    """SQLAlchemy ORM model for one cached key/content pair"""
    __tablename__ = 'data_cache'

    # Primary key
    key = Column('search_key', String, primary_key=True)

    # Payload, typically JSON
    content = Column(Text, nullable=False, default="")

    # Time of the last create or overwrite (naive UTC)
    written_at = Column(DateTime, nullable=False)

    # Expiration interval in seconds
    ttl_seconds = Column(Float, nullable=False, default=ONE_DAY_SECONDS)

    def __repr__(self):
        return f"<CacheEntryORM(key='{self.key}', written_at='{self.written_at}')>"

    def to_dict(self) -> dict:
        """Convert ORM model to dictionary for Pydantic conversion"""
        return {
            'key': self.key,
            'content': self.content or '',
            'written_at': self.written_at,
            'ttl_seconds': self.ttl_seconds,
        }
