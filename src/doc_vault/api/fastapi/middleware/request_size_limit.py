from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware

from .errors.handlers import envelope_response

# multipart boundaries and part headers on top of the file bytes
MULTIPART_OVERHEAD = 16 * 1024


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects a request from its declared Content-Length before the body is read."""

    def __init__(
        self,
        app,
        max_bytes: int = 1_000_000,
        *,
        status_code: int = 413,
        message: str = "Request body exceeds allowed size.",
    ):
        super().__init__(app)
        self.max_bytes = max_bytes
        self.status_code = status_code
        self.message = message

    async def dispatch(self, request, call_next):
        length = request.headers.get("content-length")
        try:
            size = int(length) if length is not None else None
        except ValueError:
            size = None
        if size is not None and size > self.max_bytes:
            return envelope_response(self.status_code, self.message, headers={"Connection": "close"})
        return await call_next(request)
