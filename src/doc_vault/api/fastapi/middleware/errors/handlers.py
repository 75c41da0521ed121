from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from doc_vault.exceptions import DocVaultError, StorageError

logger = logging.getLogger(__name__)


def envelope_response(status: int, message: str, *, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"success": False, "message": message},
        headers=headers,
    )


async def _doc_vault_error(request: Request, exc: DocVaultError) -> JSONResponse:
    if isinstance(exc, StorageError) or exc.status_code >= 500:
        # detail stays in the logs, never in the response
        logger.error(
            "%s on %s (%s): %s",
            type(exc).__name__,
            request.url.path,
            exc.status_code,
            exc.detail or exc.message,
            exc_info=exc.__cause__ is not None,
        )
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return envelope_response(exc.status_code, exc.message)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Invalid request on %s: %s", request.url.path, exc.errors())
    return envelope_response(400, "Invalid request")


async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    return envelope_response(exc.status_code, message, headers=getattr(exc, "headers", None))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DocVaultError, _doc_vault_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception)  # type: ignore[arg-type]
