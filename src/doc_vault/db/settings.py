from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./documents.db"


class DBSettings(BaseSettings):
    """
    Database settings.

    Env support:
      - DB_* variables: DB_DATABASE_URL, DB_ECHO, DB_POOL_SIZE, DB_CONNECT_TIMEOUT, ...
      - DATABASE_URL is accepted as a fallback.
      - With neither set, a SQLite file next to the working directory is used.
    """

    database_url: Optional[str] = Field(default=None)
    echo: bool = Field(default=False)
    pool_size: int = Field(default=5)
    max_overflow: int = Field(default=10)
    pool_recycle: Optional[int] = Field(default=None)  # seconds; None -> 1800
    pool_timeout: float = Field(default=30.0)
    connect_timeout: float = Field(default=10.0)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
        # normalize legacy urls to async drivers
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("sqlite:///"):
            url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return url


@lru_cache
def get_db_settings(**kwargs) -> DBSettings:
    # Only include kwargs that are not None, so defaults in DBSettings are used
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return DBSettings(**filtered)
