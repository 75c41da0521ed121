from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine

from .base import Base
from .engine import DBEngine
from .settings import DBSettings


async def create_all(async_engine: AsyncEngine) -> None:
    # models must be imported so they register on Base.metadata
    from doc_vault.documents import models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all(async_engine: AsyncEngine) -> None:
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


def make_sqlite_engine(path: Path | str | None = None, *, echo: bool = False) -> DBEngine:
    """File-backed SQLite when ``path`` is given, in-memory otherwise."""
    url = f"sqlite+aiosqlite:///{Path(path).as_posix()}" if path else "sqlite+aiosqlite:///:memory:"
    return DBEngine(DBSettings(database_url=url, echo=echo))


@asynccontextmanager
async def ephemeral_db(path: Path | str | None = None) -> AsyncIterator[DBEngine]:
    engine = make_sqlite_engine(path)
    await create_all(engine.engine)
    try:
        yield engine
    finally:
        await engine.dispose()
