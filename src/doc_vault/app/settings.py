from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.env import pick


class AppSettings(BaseSettings):
    # flat = easy env overrides
    name: str = "doc-vault"
    version: str = "0.1.0"

    host: str = "0.0.0.0"
    port: int = Field(default=3001, validation_alias=AliasChoices("APP_PORT", "PORT"))

    # comma separated; "*" allows any origin
    cors_origins: str = "*"

    request_timeout_seconds: float = Field(default_factory=lambda: pick(prod=30.0, nonprod=15.0))
    body_timeout_seconds: float = Field(default_factory=lambda: pick(prod=15.0, nonprod=30.0))

    model_config = SettingsConfigDict(
        env_prefix="APP_",            # APP_NAME, APP_CORS_ORIGINS, ...
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    # Only include kwargs that are not None, so defaults in AppSettings are used
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered_kwargs)
