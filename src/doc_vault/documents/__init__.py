"""PDF document storage: a directory of files plus the ``documents`` table."""

from .files import FileStore
from .models import Document
from .schemas import DocumentRead
from .service import DocumentService, OrphanReport, make_stored_name
from .settings import MAX_UPLOAD_BYTES, PDF_CONTENT_TYPE, StorageSettings, get_storage_settings
from .store import DocumentStore

__all__ = [
    "Document",
    "DocumentRead",
    "DocumentService",
    "DocumentStore",
    "FileStore",
    "OrphanReport",
    "StorageSettings",
    "get_storage_settings",
    "make_stored_name",
    "MAX_UPLOAD_BYTES",
    "PDF_CONTENT_TYPE",
]
