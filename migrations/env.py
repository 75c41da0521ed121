from __future__ import annotations
import os
import sys
import asyncio
import logging
from pathlib import Path
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy import engine_from_config
from sqlalchemy.engine.url import make_url

# --- Ensure project root and src/ on sys.path ---
ROOT = Path(__file__).resolve().parents[1]  # migrations/ -> project root
for p in (ROOT, ROOT / "src"):
    s = str(p)
    if p.exists() and s not in sys.path:
        sys.path.insert(0, s)

from doc_vault.app.core.logging import setup_logging  # noqa: E402
from doc_vault.db.base import Base  # noqa: E402
from doc_vault.db.settings import get_db_settings  # noqa: E402
from doc_vault.documents import models  # noqa: E402,F401

config = context.config

# --- Logging: app logging unless ALEMBIC_USE_APP_LOGGING=0 ---
if os.getenv("ALEMBIC_USE_APP_LOGGING", "1") == "1":
    setup_logging(level=os.getenv("LOG_LEVEL"), fmt=os.getenv("LOG_FORMAT"))
elif config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")

# --- Database URL: DB_DATABASE_URL / DATABASE_URL win over alembic.ini ---
if os.getenv("DB_DATABASE_URL") or os.getenv("DATABASE_URL"):
    config.set_main_option("sqlalchemy.url", get_db_settings().resolved_database_url)

target_metadata = Base.metadata

url_str = config.get_main_option("sqlalchemy.url") or ""
is_async = make_url(url_str).get_dialect().is_async


def run_migrations_offline():
    context.configure(
        url=url_str,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online_async():
    from sqlalchemy.ext.asyncio import create_async_engine
    connectable = create_async_engine(url_str, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online_sync():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        do_run_migrations(connection)
    connectable.dispose()


logger.debug("Running migrations against %s", make_url(url_str).render_as_string(hide_password=True))

if context.is_offline_mode():
    run_migrations_offline()
elif is_async:
    asyncio.run(run_migrations_online_async())
else:
    run_migrations_online_sync()
