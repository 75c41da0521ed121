from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from doc_vault.db.integration import get_engine
from doc_vault.documents.files import FileStore
from doc_vault.documents.service import DocumentService
from doc_vault.documents.settings import StorageSettings


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store  # type: ignore[attr-defined]


def get_storage_settings_dep(request: Request) -> StorageSettings:
    return request.app.state.storage_settings  # type: ignore[attr-defined]


def get_document_service(request: Request) -> DocumentService:
    return DocumentService(
        get_engine(request),
        get_file_store(request),
        get_storage_settings_dep(request),
    )


DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
