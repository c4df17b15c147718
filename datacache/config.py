from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


ONE_DAY_SECONDS: float = 86400.0


class Settings(BaseSettings):
    """Application configuration"""

    # Storage Settings
    cache_db_path: str = "./data/cache.db"
    database_echo: bool = False  # Set to True for SQL debug logging

    # Cache Settings
    cache_default_ttl_seconds: float = ONE_DAY_SECONDS
    cache_disabled: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


class CacheConfig(BaseModel):
    """Per-instance cache configuration.

    ``is_disabled`` can be flipped at runtime; while it is set every lookup
    is a miss, but writes still go through.
    """
    is_disabled: bool = False
    default_ttl_seconds: float = Field(ONE_DAY_SECONDS, ge=0)

    model_config = ConfigDict(validate_assignment=True)

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "CacheConfig":
        source = source or settings
        return cls(
            is_disabled=source.cache_disabled,
            default_ttl_seconds=source.cache_default_ttl_seconds,
        )


settings = Settings()
