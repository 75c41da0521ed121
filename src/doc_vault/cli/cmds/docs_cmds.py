from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import httpx
import typer

from doc_vault.client import DEFAULT_BASE_URL, DocumentsClient, filter_documents, format_file_size
from doc_vault.exceptions import DocVaultError

app = typer.Typer(no_args_is_help=True, help="Manage documents on a running server")

BASE_URL_OPTION = typer.Option(DEFAULT_BASE_URL, "--base-url", envvar="DOC_VAULT_BASE_URL", help="API root URL")


@contextmanager
def _client(base_url: str) -> Iterator[DocumentsClient]:
    client = DocumentsClient(base_url)
    try:
        yield client
    except DocVaultError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1)
    except httpx.HTTPError as exc:
        typer.echo(f"Error: cannot reach {base_url}: {exc}", err=True)
        raise typer.Exit(code=1)
    finally:
        client.close()


@app.command("list")
def list_cmd(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by original name"),
    base_url: str = BASE_URL_OPTION,
):
    """List documents, newest first."""
    with _client(base_url) as client:
        docs = client.list_documents()
    shown = filter_documents(docs, search)
    for d in shown:
        typer.echo(
            f"{d['id']:>6}  {d['uploadDate']}  {format_file_size(d['fileSize']):>10}  {d['originalName']}"
        )
    total = sum(d["fileSize"] for d in docs)
    typer.echo(f"{len(shown)} of {len(docs)} document(s), {format_file_size(total)} stored")


@app.command("upload")
def upload(
    path: Path = typer.Argument(..., help="PDF file to upload"),
    base_url: str = BASE_URL_OPTION,
):
    """Upload a PDF."""
    with _client(base_url) as client:
        doc = client.upload(path)
    typer.echo(f"Uploaded {doc['originalName']} as #{doc['id']} ({format_file_size(doc['fileSize'])})")


@app.command("download")
def download(
    document_id: int = typer.Argument(...),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File or directory to write to"),
    base_url: str = BASE_URL_OPTION,
):
    """Download a document."""
    with _client(base_url) as client:
        target = client.download(document_id, output)
    typer.echo(str(target))


@app.command("delete")
def delete(
    document_id: int = typer.Argument(...),
    base_url: str = BASE_URL_OPTION,
):
    """Delete a document and its file."""
    with _client(base_url) as client:
        message = client.delete(document_id)
    typer.echo(message)


def register(app_root: typer.Typer) -> None:
    app_root.add_typer(app, name="docs")
