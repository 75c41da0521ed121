from __future__ import annotations

import sqlite3
from pathlib import Path

from typer.testing import CliRunner

from doc_vault.cli import app as cli_app

runner = CliRunner()

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _tables(db: Path) -> set[str]:
    with sqlite3.connect(db) as conn:
        return {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}


def _url(db: Path) -> str:
    return f"sqlite+aiosqlite:///{db.as_posix()}"


def test_create_all(tmp_path):
    db = tmp_path / "cli.db"
    result = runner.invoke(cli_app, ["db", "create-all", "--database-url", _url(db)])
    assert result.exit_code == 0, result.output
    assert "documents" in _tables(db)


def test_upgrade_and_downgrade(tmp_path, monkeypatch):
    monkeypatch.setenv("ALEMBIC_USE_APP_LOGGING", "0")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_DATABASE_URL", raising=False)
    db = tmp_path / "migrated.db"
    common = ["--project-root", str(PROJECT_ROOT), "--database-url", _url(db)]

    result = runner.invoke(cli_app, ["db", "upgrade", "head", *common])
    assert result.exit_code == 0, result.output
    assert {"documents", "alembic_version"} <= _tables(db)

    result = runner.invoke(cli_app, ["db", "downgrade", "base", *common])
    assert result.exit_code == 0, result.output
    assert "documents" not in _tables(db)


def test_missing_alembic_ini(tmp_path):
    result = runner.invoke(cli_app, ["db", "current", "--project-root", str(tmp_path)])
    assert result.exit_code == 2


def test_orphans_report_and_delete(tmp_path):
    db = tmp_path / "orphans.db"
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    (uploads / "doc-1-stray.pdf").write_bytes(b"stray")
    args = ["orphans", "--database-url", _url(db), "--upload-dir", str(uploads)]

    result = runner.invoke(cli_app, args)
    assert result.exit_code == 0, result.output
    assert "doc-1-stray.pdf" in result.stdout
    assert "no record" in result.stdout
    assert (uploads / "doc-1-stray.pdf").exists()

    result = runner.invoke(cli_app, [*args, "--delete"])
    assert "removed" in result.stdout
    assert not (uploads / "doc-1-stray.pdf").exists()

    result = runner.invoke(cli_app, args)
    assert "No orphans found." in result.stdout
