from .documents import DocumentServiceDep, get_document_service, get_file_store, get_storage_settings_dep

__all__ = ["DocumentServiceDep", "get_document_service", "get_file_store", "get_storage_settings_dep"]
