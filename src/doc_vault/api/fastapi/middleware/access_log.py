from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("doc_vault.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request; the JSON formatter renders the extras as ``http``."""

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            client = request.client.host if request.client else None
            logger.info(
                '%s "%s %s" %s %.2fms',
                client or "-",
                request.method,
                request.url.path,
                status,
                duration_ms,
                extra={
                    "http_method": request.method,
                    "path": request.url.path,
                    "status_code": status,
                    "client_ip": client,
                    "user_agent": request.headers.get("user-agent"),
                    "duration_ms": duration_ms,
                    "request_id": request.headers.get("x-request-id"),
                },
            )
