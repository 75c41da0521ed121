from __future__ import annotations


class DocVaultError(Exception):
    """Base error for the document service.

    Every subclass carries the HTTP status it maps to and a caller-safe
    ``message``. ``detail`` is for server-side logs only.
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, detail: str | None = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(DocVaultError):
    """Bad input: missing file, wrong media type, payload too large."""

    status_code = 400
    default_message = "Invalid request"

    NO_FILE = "no file"
    UNSUPPORTED_TYPE = "unsupported type"
    TOO_LARGE = "too large"
    INVALID_REQUEST = "invalid request"

    _MESSAGES = {
        NO_FILE: "No file uploaded",
        UNSUPPORTED_TYPE: "Only PDF files are allowed",
        TOO_LARGE: "File too large. Maximum size is 10MB.",
        INVALID_REQUEST: "Invalid request",
    }

    def __init__(self, reason: str, message: str | None = None, *, detail: str | None = None):
        self.reason = reason
        super().__init__(message or self._MESSAGES.get(reason, reason), detail=detail)


class NotFoundError(DocVaultError):
    """Unknown document id, or a record whose backing file is gone."""

    status_code = 404
    default_message = "Document not found"


class StorageError(DocVaultError):
    """Disk or table failure. ``message`` is generic; ``detail`` holds the cause."""

    status_code = 500
    default_message = "Internal server error"


__all__ = ["DocVaultError", "ValidationError", "NotFoundError", "StorageError"]
