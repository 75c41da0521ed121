from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


class StorageSettings(BaseSettings):
    """Where uploaded files live and how large they may be.

    Env: STORAGE_UPLOAD_DIR, STORAGE_MAX_UPLOAD_BYTES, STORAGE_CHUNK_SIZE
    """

    upload_dir: Path = Field(default=Path("uploads"))
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES, gt=0)
    chunk_size: int = Field(default=64 * 1024, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def max_upload_label(self) -> str:
        mb = self.max_upload_bytes / (1024 * 1024)
        return f"{mb:g}MB"


@lru_cache
def get_storage_settings(**kwargs) -> StorageSettings:
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return StorageSettings(**filtered)
