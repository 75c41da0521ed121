from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from alembic import command
from alembic.config import Config

from .engine import DBEngine
from .settings import DBSettings, get_db_settings
from .testing import create_all as _create_all

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Database schema commands")

ALEMBIC_DIR = "migrations"
ALEMBIC_INI = "alembic.ini"


def _settings(database_url: Optional[str]) -> DBSettings:
    if database_url:
        return DBSettings(database_url=database_url)
    return get_db_settings()


def _load_config(project_root: Path, database_url: Optional[str]) -> Config:
    ini = project_root / ALEMBIC_INI
    if not ini.exists():
        typer.echo(f"{ini} not found (pass --project-root)", err=True)
        raise typer.Exit(code=2)
    cfg = Config(str(ini))
    cfg.set_main_option("script_location", str(project_root / ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", _settings(database_url).resolved_database_url)
    # let env.py decide logging (app logger vs fileConfig)
    cfg.attributes["configure_logger"] = False
    return cfg


@app.command("create-all")
def create_all(
        database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    """Create missing tables directly from the models (no migration history)."""
    engine = DBEngine(_settings(database_url))

    async def _run() -> None:
        try:
            await _create_all(engine.engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    typer.echo(f"Tables ensured on {engine.safe_url()}")


@app.command("upgrade")
def upgrade(
        revision: str = typer.Argument("head"),
        project_root: Path = typer.Option(Path.cwd(), help="Root containing alembic.ini"),
        database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    cfg = _load_config(project_root.resolve(), database_url)
    command.upgrade(cfg, revision)


@app.command("downgrade")
def downgrade(
        revision: str = typer.Argument("-1"),
        project_root: Path = typer.Option(Path.cwd(), help="Root containing alembic.ini"),
        database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    cfg = _load_config(project_root.resolve(), database_url)
    command.downgrade(cfg, revision)


@app.command("current")
def current(
        verbose: bool = typer.Option(False, help="Verbose output"),
        project_root: Path = typer.Option(Path.cwd(), help="Root containing alembic.ini"),
        database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    cfg = _load_config(project_root.resolve(), database_url)
    command.current(cfg, verbose=verbose)


@app.command("history")
def history(
        verbose: bool = typer.Option(False, help="Verbose output"),
        project_root: Path = typer.Option(Path.cwd(), help="Root containing alembic.ini"),
        database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    cfg = _load_config(project_root.resolve(), database_url)
    command.history(cfg, verbose=verbose)
