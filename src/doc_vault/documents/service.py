"""Upload, query and delete operations over the document store.

Each operation runs in its own unit of work and returns only after the
commit, so whatever the caller sees is already durable.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from doc_vault.db.engine import DBEngine
from doc_vault.db.uow import UnitOfWork
from doc_vault.exceptions import NotFoundError, StorageError, ValidationError

from .files import FileStore, iter_upload
from .models import Document
from .settings import PDF_CONTENT_TYPE, StorageSettings
from .store import DocumentStore

logger = logging.getLogger(__name__)

_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


class UploadSource(Protocol):
    """What the upload handler needs from a multipart part (e.g. ``UploadFile``)."""

    filename: str | None
    content_type: str | None
    size: int | None

    async def read(self, size: int = -1) -> bytes: ...


def make_stored_name(original_name: str, *, now_ms: int | None = None) -> str:
    """``doc-<epoch ms>-<uuid4 hex><ext>``; the extension is kept when it is short and alphanumeric."""
    ms = int(time.time() * 1000) if now_ms is None else now_ms
    ext = PurePath(original_name).suffix
    if not _EXTENSION.match(ext):
        ext = ""
    return f"doc-{ms}-{uuid.uuid4().hex}{ext}"


@dataclass
class OrphanReport:
    files_without_record: list[str] = field(default_factory=list)
    records_without_file: list[Document] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.files_without_record and not self.records_without_file


class DocumentService:
    def __init__(self, engine: DBEngine, files: FileStore, settings: StorageSettings):
        self.engine = engine
        self.files = files
        self.settings = settings

    @property
    def too_large_message(self) -> str:
        return f"File too large. Maximum size is {self.settings.max_upload_label}."

    def validate(self, source: UploadSource | None) -> UploadSource:
        """Presence, then media type, then declared size. Touches nothing on disk."""
        if source is None or not source.filename:
            raise ValidationError(ValidationError.NO_FILE)
        if source.content_type != PDF_CONTENT_TYPE:
            raise ValidationError(
                ValidationError.UNSUPPORTED_TYPE, detail=f"content type {source.content_type!r}"
            )
        if source.size is not None and source.size > self.settings.max_upload_bytes:
            raise ValidationError(ValidationError.TOO_LARGE, self.too_large_message)
        return source

    async def upload(self, source: UploadSource | None) -> Document:
        source = self.validate(source)
        original_name = PurePath(source.filename.replace("\\", "/")).name or "document.pdf"
        stored_name = make_stored_name(original_name)

        size = await self.files.write(
            stored_name,
            iter_upload(source, self.settings.chunk_size),
            max_bytes=self.settings.max_upload_bytes,
            too_large_message=self.too_large_message,
        )

        try:
            async with UnitOfWork(self.engine) as uow:
                doc = await uow.bind(DocumentStore).insert(stored_name, original_name, size)
        except SQLAlchemyError as exc:
            logger.error("Insert failed for %s: %s", stored_name, exc, exc_info=True)
            await self._discard(stored_name)
            raise StorageError("Error saving file metadata", detail=str(exc)) from exc

        logger.info(
            "Stored %s as %s (%d bytes)", original_name, stored_name, size, extra={"document_id": doc.id}
        )
        return doc

    async def _discard(self, stored_name: str) -> None:
        try:
            await run_in_threadpool(self.files.remove, stored_name)
        except OSError as exc:
            logger.error("Orphaned file %s left on disk: %s", stored_name, exc)

    async def list_documents(self) -> Sequence[Document]:
        try:
            async with UnitOfWork(self.engine, commit_on_success=False) as uow:
                return await uow.bind(DocumentStore).list_all()
        except SQLAlchemyError as exc:
            logger.error("Listing documents failed: %s", exc, exc_info=True)
            raise StorageError("Error fetching documents", detail=str(exc)) from exc

    async def get_document(self, document_id: int) -> Document:
        try:
            async with UnitOfWork(self.engine, commit_on_success=False) as uow:
                doc = await uow.bind(DocumentStore).get(document_id)
        except SQLAlchemyError as exc:
            logger.error("Fetching document %s failed: %s", document_id, exc, exc_info=True)
            raise StorageError("Error fetching document", detail=str(exc)) from exc
        if doc is None:
            raise NotFoundError("Document not found")
        return doc

    async def open_document(self, document_id: int) -> tuple[Document, Path]:
        """The record and the path of its file, which must exist."""
        doc = await self.get_document(document_id)
        path = self.files.path(doc.stored_name)
        if not await run_in_threadpool(path.is_file):
            logger.warning(
                "Record %s has no file %s on disk", doc.id, doc.stored_name, extra={"document_id": doc.id}
            )
            raise NotFoundError("File not found on server")
        return doc, path

    async def delete_document(self, document_id: int) -> Document:
        doc = await self.get_document(document_id)

        file_error: OSError | None = None
        try:
            if not await run_in_threadpool(self.files.remove, doc.stored_name):
                logger.info("File %s already gone; removing record %s", doc.stored_name, doc.id)
        except OSError as exc:
            file_error = exc
            logger.warning("Could not remove %s: %s", doc.stored_name, exc)

        try:
            async with UnitOfWork(self.engine) as uow:
                await uow.bind(DocumentStore).delete(doc.id)
        except SQLAlchemyError as exc:
            logger.error(
                "Deleting record %s failed (file removal %s): %s",
                doc.id,
                "failed" if file_error else "done",
                exc,
                exc_info=True,
            )
            raise StorageError("Error deleting document", detail=str(exc)) from exc

        if file_error is not None:
            logger.error("Record %s deleted but file %s remains: %s", doc.id, doc.stored_name, file_error)
        logger.info("Deleted document %s", doc.id, extra={"document_id": doc.id})
        return doc

    async def find_orphans(self) -> OrphanReport:
        """Files with no record and records with no file."""
        docs = await self.list_documents()
        on_disk = set(await run_in_threadpool(self.files.names))
        known = {d.stored_name for d in docs}
        return OrphanReport(
            files_without_record=sorted(on_disk - known),
            records_without_file=[d for d in docs if d.stored_name not in on_disk],
        )

    async def purge_orphan_files(self) -> list[str]:
        """Delete files no record points at. Records are never touched."""
        report = await self.find_orphans()
        removed = []
        for name in report.files_without_record:
            if await run_in_threadpool(self.files.remove, name):
                removed.append(name)
                logger.info("Removed orphan file %s", name)
        return removed
