"""
Root conftest.py for doc-vault tests.

Every app and service built here is isolated: its own temporary upload
directory and its own file-backed SQLite database under ``tmp_path``.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from doc_vault.api.fastapi import create_app
from doc_vault.app.settings import AppSettings
from doc_vault.db.testing import ephemeral_db, make_sqlite_engine
from doc_vault.documents import DocumentService, FileStore, StorageSettings


def pytest_collection_modifyitems(config, items):
    """Mark tests by folder so `-m documents` / `-m acceptance` select them."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/acceptance/" in norm:
            item.add_marker(pytest.mark.acceptance)
        if "/tests/unit/documents/" in norm:
            item.add_marker(pytest.mark.documents)


def pytest_configure(config):
    for name, desc in [
        ("documents", "Document store and service tests"),
        ("storage", "Upload directory tests"),
        ("acceptance", "End-to-end HTTP scenarios"),
    ]:
        config.addinivalue_line("markers", f"{name}: {desc}")


# =============================================================================
# PAYLOADS
# =============================================================================


def make_pdf(size: int) -> bytes:
    """A ``size``-byte payload that starts like a PDF."""
    head = b"%PDF-1.4\n"
    if size <= len(head):
        return head[:size]
    return head + b"0" * (size - len(head))


class FakeUpload:
    """Stands in for a multipart part (``UploadFile``)."""

    def __init__(
        self,
        data: bytes,
        filename: str | None = "report.pdf",
        content_type: str | None = "application/pdf",
        size: int | None = None,
    ):
        self._buf = io.BytesIO(data)
        self.filename = filename
        self.content_type = content_type
        self.size = size

    async def read(self, size: int = -1) -> bytes:
        return self._buf.read(size)


@pytest.fixture
def pdf_bytes() -> Callable[[int], bytes]:
    return make_pdf


# =============================================================================
# STORAGE / DATABASE
# =============================================================================


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def storage_settings(upload_dir) -> StorageSettings:
    return StorageSettings(upload_dir=upload_dir)


@pytest.fixture
def file_store(upload_dir) -> FileStore:
    store = FileStore(upload_dir)
    store.ensure_dir()
    return store


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    async with ephemeral_db(tmp_path / "documents.db") as engine:
        yield engine


@pytest.fixture
def service(db_engine, file_store, storage_settings) -> DocumentService:
    return DocumentService(db_engine, file_store, storage_settings)


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def make_app(tmp_path, storage_settings) -> Callable[..., FastAPI]:
    def _make(**overrides) -> FastAPI:
        overrides.setdefault("engine", make_sqlite_engine(tmp_path / "api.db"))
        app_settings = overrides.pop("app_settings", AppSettings())
        return create_app(app_settings, overrides.pop("storage_settings", storage_settings), **overrides)

    return _make


@pytest.fixture
def app(make_app) -> FastAPI:
    return make_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def async_client(app):
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c
