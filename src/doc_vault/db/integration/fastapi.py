from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request

from ..engine import DBEngine
from ..settings import get_db_settings
from ..testing import create_all

logger = logging.getLogger(__name__)


def attach_db(app: FastAPI, engine: DBEngine | None = None, *, create_tables: bool = True) -> DBEngine:
    """Put ``engine`` on app.state for the app's lifetime and dispose it on shutdown.

    Tables are created on startup when ``create_tables`` is set, the same as
    ``CREATE TABLE IF NOT EXISTS``; migrations remain the way to evolve them.
    """
    engine = engine or DBEngine(get_db_settings())
    app.state.db_engine = engine  # type: ignore[attr-defined]

    existing = getattr(app.router, "lifespan_context", None)  # type: ignore[attr-defined]

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        _app.state.db_engine = engine  # type: ignore[attr-defined]
        try:
            settings = engine.settings
            logger.info(
                "DB attached: url=%s driver=%s pool_size=%s max_overflow=%s",
                engine.safe_url(),
                engine.engine.url.get_backend_name(),
                settings.pool_size,
                settings.max_overflow,
            )
            if create_tables:
                await create_all(engine.engine)
            if existing:
                async with existing(_app):  # type: ignore[misc]
                    yield
            else:
                yield
        finally:
            await engine.dispose()
            logger.info("Database connection closed.")

    app.router.lifespan_context = composed_lifespan  # type: ignore[attr-defined]
    return engine


def get_engine(request: Request) -> DBEngine:
    return request.app.state.db_engine  # type: ignore[attr-defined]

