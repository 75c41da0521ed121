from __future__ import annotations

from typing import Optional

import typer

from doc_vault.app.settings import get_app_settings
from doc_vault.cli.cmds import register_docs, register_orphans
from doc_vault.db.cli import app as db_app

app = typer.Typer(no_args_is_help=True, add_completion=False, help="doc-vault: PDF document storage service")


@app.command("serve")
def serve(
        host: Optional[str] = typer.Option(None, help="Bind address (default APP_HOST)"),
        port: Optional[int] = typer.Option(None, help="Bind port (default APP_PORT / PORT)"),
        reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_app_settings()
    uvicorn.run(
        "doc_vault.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


app.add_typer(db_app, name="db")
register_docs(app)
register_orphans(app)


def main() -> None:
    app()


__all__ = ["app", "main"]
