from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional
from functools import lru_cache
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./container_priority.db"

    # Database Connection Pool Settings
    DB_POOL_SIZE: int = 10  # Base number of connections in pool
    DB_MAX_OVERFLOW: int = 20  # Extra connections allowed beyond pool_size
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for connection from pool
    DB_POOL_RECYCLE: int = 1800  # Recycle connections after 30 minutes

    # App Settings
    APP_NAME: str = "Container Task Priority Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # RCS callback channel
    RCS_CALLBACK_URL: str = "http://localhost:9010/api/callback"
    RCS_CALLBACK_TIMEOUT: float = 10.0  # Seconds per callback request
    RCS_CALLBACK_TOKEN: Optional[str] = None  # Bearer token, if the RCS gateway needs one

    # Warehouse
    WAREHOUSE_CODE: Optional[str] = None  # Fallback when picking orders carry no warehouse code

    # Shelves pinned in place; never re-ranked while the picking area is busy
    STATIC_CONTAINER_CODES: list[str] = []

    # Ranking
    PROMOTE_TAIL_CONTAINER: bool = False  # Lift the last shelf of a station sequence to 997

    @field_validator('STATIC_CONTAINER_CODES', mode='before')
    @classmethod
    def parse_static_container_codes(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return []
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [code.strip() for code in v.split(',') if code.strip()]
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
