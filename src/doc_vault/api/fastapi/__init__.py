from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from doc_vault.api.fastapi.middleware import (
    MULTIPART_OVERHEAD,
    AccessLogMiddleware,
    BodyReadTimeoutMiddleware,
    CatchAllExceptionMiddleware,
    HandlerTimeoutMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
    register_error_handlers,
)
from doc_vault.api.fastapi.routers import register_all_routers
from doc_vault.api.fastapi.settings import ApiConfig
from doc_vault.app.core.env import get_env
from doc_vault.app.settings import AppSettings, get_app_settings
from doc_vault.db.engine import DBEngine
from doc_vault.db.integration import attach_db, db_health_router
from doc_vault.documents.files import FileStore
from doc_vault.documents.settings import StorageSettings, get_storage_settings
from doc_vault.exceptions import ValidationError

logger = logging.getLogger(__name__)

CONTENT_LENGTH_LIMIT_FACTOR = 2


def create_app(
        app_settings: AppSettings | None = None,
        storage_settings: StorageSettings | None = None,
        *,
        engine: DBEngine | None = None,
        file_store: FileStore | None = None,
        api_config: ApiConfig | None = None,
) -> FastAPI:
    """Build the API with its own engine and file store.

    Nothing is process-global: pass an engine and a file store (or settings
    pointing at temporary locations) to get a fully isolated app.
    """
    app_settings = app_settings or get_app_settings()
    storage_settings = storage_settings or get_storage_settings()
    api_config = api_config or ApiConfig()
    file_store = file_store or FileStore(storage_settings.upload_dir)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        file_store.ensure_dir()
        logger.info("Serving documents from %s", file_store.base_path.resolve())
        yield
        logger.info("Shutting down %s", app_settings.name)

    app = FastAPI(
        title=app_settings.name,
        version=app_settings.version,
        lifespan=lifespan,
    )
    app.state.file_store = file_store
    app.state.storage_settings = storage_settings
    attach_db(app, engine)

    # Error handling
    register_error_handlers(app)

    # innermost first: each add_middleware wraps everything added before it
    app.add_middleware(HandlerTimeoutMiddleware, timeout_seconds=app_settings.request_timeout_seconds)
    app.add_middleware(BodyReadTimeoutMiddleware, timeout_seconds=app_settings.body_timeout_seconds)
    # backstop for bodies far over the ceiling; anything smaller is parsed so
    # the part is checked for type before size
    too_large = f"File too large. Maximum size is {storage_settings.max_upload_label}."
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_bytes=CONTENT_LENGTH_LIMIT_FACTOR * storage_settings.max_upload_bytes + MULTIPART_OVERHEAD,
        status_code=ValidationError.status_code,
        message=too_large,
    )
    app.add_middleware(CatchAllExceptionMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    origins = app_settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    app.add_middleware(AccessLogMiddleware)

    register_all_routers(app, base_package=api_config.routers_package, prefix=api_config.base_prefix)
    app.include_router(db_health_router)

    logger.info(f"{app_settings.version} version of {app_settings.name} initialized [env: {get_env()}]")
    return app


__all__ = ["create_app", "ApiConfig"]
