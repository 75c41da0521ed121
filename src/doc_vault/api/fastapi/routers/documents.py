"""REST endpoints for PDF documents.

    POST   /documents/upload   multipart field ``file``
    GET    /documents          all records, newest first
    GET    /documents/{id}     the PDF as an attachment
    DELETE /documents/{id}     file and record
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import FileResponse

from doc_vault.documents.schemas import DocumentRead, Envelope, ErrorEnvelope, MessageEnvelope
from doc_vault.documents.settings import PDF_CONTENT_TYPE

from ..dependencies import DocumentServiceDep

ROUTER_PREFIX = "/documents"
ROUTER_TAG = "documents"

router = APIRouter()

_ERRORS = {status: {"model": ErrorEnvelope} for status in (400, 404, 500)}


@router.post(
    "/upload",
    response_model=Envelope[DocumentRead],
    response_model_exclude_none=True,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
)
async def upload_document(
    service: DocumentServiceDep,
    file: Optional[UploadFile] = File(None),
) -> Envelope[DocumentRead]:
    """Store one PDF (<= 10MB by default) and return its record."""
    try:
        doc = await service.upload(file)
    finally:
        if file is not None:
            await file.close()
    return Envelope(message="File uploaded successfully", data=DocumentRead.model_validate(doc))


@router.get(
    "",
    response_model=Envelope[list[DocumentRead]],
    response_model_exclude_none=True,
    responses={500: _ERRORS[500]},
)
async def list_documents(service: DocumentServiceDep) -> Envelope[list[DocumentRead]]:
    docs = await service.list_documents()
    return Envelope(data=[DocumentRead.model_validate(d) for d in docs])


def attachment_disposition(filename: str) -> str:
    """``attachment; filename="<name>"``, plus an RFC 5987 ``filename*`` for non-ASCII names."""
    quoted = filename.replace("\\", "\\\\").replace('"', '\\"')
    if filename.isascii():
        return f'attachment; filename="{quoted}"'
    fallback = "".join(c if c.isascii() else "_" for c in quoted)
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quote(filename, safe='')}"


@router.get("/{document_id}", response_class=FileResponse, responses={404: _ERRORS[404], 500: _ERRORS[500]})
async def download_document(document_id: int, service: DocumentServiceDep) -> FileResponse:
    doc, path = await service.open_document(document_id)
    return FileResponse(
        path,
        media_type=PDF_CONTENT_TYPE,
        headers={"Content-Disposition": attachment_disposition(doc.original_name)},
    )


@router.delete("/{document_id}", response_model=MessageEnvelope, responses=_ERRORS)
async def delete_document(document_id: int, service: DocumentServiceDep) -> MessageEnvelope:
    await service.delete_document(document_id)
    return MessageEnvelope(message="File deleted successfully")
