from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from doc_vault.db.engine import DBEngine
from doc_vault.db.settings import DBSettings, get_db_settings
from doc_vault.db.testing import create_all
from doc_vault.documents import DocumentService, FileStore, OrphanReport
from doc_vault.documents.settings import StorageSettings, get_storage_settings


async def _scan(
    db_settings: DBSettings, storage: StorageSettings, delete: bool
) -> tuple[OrphanReport, list[str]]:
    engine = DBEngine(db_settings)
    try:
        await create_all(engine.engine)
        service = DocumentService(engine, FileStore(storage.upload_dir), storage)
        report = await service.find_orphans()
        removed = await service.purge_orphan_files() if delete else []
        return report, removed
    finally:
        await engine.dispose()


def orphans(
    delete: bool = typer.Option(False, "--delete", help="Remove files that no record points at"),
    database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
    upload_dir: Optional[Path] = typer.Option(None, help="Override STORAGE_UPLOAD_DIR"),
):
    """Report files without a record and records without a file.

    ``--delete`` removes the orphan files only; records are never touched.
    """
    db_settings = DBSettings(database_url=database_url) if database_url else get_db_settings()
    storage = get_storage_settings()
    if upload_dir is not None:
        storage = storage.model_copy(update={"upload_dir": upload_dir})

    report, removed = asyncio.run(_scan(db_settings, storage, delete))

    if report.clean:
        typer.echo("No orphans found.")
        return
    for name in report.files_without_record:
        state = "removed" if name in removed else "no record"
        typer.echo(f"file    {name}  ({state})")
    for doc in report.records_without_file:
        typer.echo(f"record  #{doc.id} {doc.original_name}  (file {doc.stored_name} missing)")


def register(app_root: typer.Typer) -> None:
    app_root.command("orphans")(orphans)
