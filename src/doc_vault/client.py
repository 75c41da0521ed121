"""Synchronous client for the documents API.

Mirrors what the browser front end does: it checks type and size before
sending, unwraps the ``{success, message, data}`` envelope and turns error
envelopes back into :mod:`doc_vault.exceptions` errors.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import unquote

import httpx

from doc_vault.documents.settings import MAX_UPLOAD_BYTES, PDF_CONTENT_TYPE
from doc_vault.exceptions import DocVaultError, NotFoundError, StorageError, ValidationError
from doc_vault.http import new_httpx_client

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")
_FILENAME_STAR = re.compile(r"filename\*\s*=\s*(?:UTF-8|utf-8)''([^;]+)")
_FILENAME = re.compile(r'filename\s*=\s*"((?:[^"\\]|\\.)*)"')


def format_file_size(num_bytes: int) -> str:
    """Human readable size: ``0 Bytes``, ``512 Bytes``, ``1.5 KB``, ``10 MB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    i = 0
    while i < len(_SIZE_UNITS) - 1 and num_bytes >= 1024 ** (i + 1):
        i += 1
    value = f"{num_bytes / 1024 ** i:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[i]}"


def filter_documents(documents: Iterable[dict[str, Any]], term: str | None) -> list[dict[str, Any]]:
    """Case-insensitive substring match on ``originalName``; an empty term keeps everything."""
    docs = list(documents)
    if not term:
        return docs
    needle = term.lower()
    return [d for d in docs if needle in str(d.get("originalName", "")).lower()]


def filename_from_disposition(header: str | None) -> str | None:
    if not header:
        return None
    m = _FILENAME_STAR.search(header)
    if m:
        return unquote(m.group(1).strip())
    m = _FILENAME.search(header)
    return re.sub(r"\\(.)", r"\1", m.group(1)) if m else None


def _error_from_response(resp: httpx.Response) -> DocVaultError:
    try:
        message = resp.json().get("message")
    except ValueError:
        message = None
    message = message or resp.reason_phrase or "Request failed"
    if resp.status_code == 404:
        return NotFoundError(message)
    if resp.status_code == 400:
        return ValidationError(_reason_for(message), message)
    return StorageError(message, detail=f"HTTP {resp.status_code}")


def _reason_for(message: str) -> str:
    for reason, text in ValidationError._MESSAGES.items():
        if text == message:
            return reason
    if message.startswith("File too large"):
        return ValidationError.TOO_LARGE
    return ValidationError.INVALID_REQUEST


class DocumentsClient:
    """Talks to ``<base_url>/documents`` and ``<base_url>/health``.

    Pass ``client`` to reuse a configured ``httpx.Client`` (a FastAPI
    ``TestClient`` works too); otherwise one is created and owned here.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        client: httpx.Client | None = None,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_upload_bytes = max_upload_bytes
        self._owns_client = client is None
        self._client = client or new_httpx_client()

    def __enter__(self) -> "DocumentsClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _json(self, resp: httpx.Response) -> dict[str, Any]:
        if not resp.is_success:
            raise _error_from_response(resp)
        return resp.json()

    def health(self) -> dict[str, Any]:
        return self._json(self._client.get(self._url("/health")))

    def list_documents(self) -> list[dict[str, Any]]:
        return self._json(self._client.get(self._url("/documents"))).get("data") or []

    def check_upload(self, path: Path) -> int:
        """Client-side checks before sending; returns the file size."""
        if not path.is_file():
            raise ValidationError(ValidationError.NO_FILE, detail=str(path))
        content_type, _ = mimetypes.guess_type(path.name)
        if content_type != PDF_CONTENT_TYPE:
            raise ValidationError(ValidationError.UNSUPPORTED_TYPE, detail=str(content_type))
        size = path.stat().st_size
        if size > self.max_upload_bytes:
            raise ValidationError(
                ValidationError.TOO_LARGE,
                f"File too large. Maximum size is {self.max_upload_bytes // (1024 * 1024)}MB.",
            )
        return size

    def upload(self, path: Path | str) -> dict[str, Any]:
        path = Path(path)
        self.check_upload(path)
        with path.open("rb") as fh:
            resp = self._client.post(
                self._url("/documents/upload"),
                files={"file": (path.name, fh, PDF_CONTENT_TYPE)},
            )
        body = self._json(resp)
        logger.debug("Uploaded %s as document %s", path.name, (body.get("data") or {}).get("id"))
        return body["data"]

    def download(self, document_id: int, dest: Path | str | None = None) -> Path:
        """Stream a document to ``dest`` (a file or directory; defaults to the cwd)."""
        with self._client.stream("GET", self._url(f"/documents/{document_id}")) as resp:
            if not resp.is_success:
                resp.read()
                raise _error_from_response(resp)
            name = filename_from_disposition(resp.headers.get("content-disposition"))
            target = Path(dest) if dest is not None else Path.cwd()
            if target.is_dir():
                target = target / Path(name or f"document-{document_id}.pdf").name
            with target.open("wb") as out:
                for chunk in resp.iter_bytes():
                    out.write(chunk)
        return target

    def delete(self, document_id: int) -> str:
        body = self._json(self._client.delete(self._url(f"/documents/{document_id}")))
        return body.get("message") or ""
