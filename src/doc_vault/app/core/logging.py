from __future__ import annotations

import json
import logging
import os
from logging.config import dictConfig
from traceback import format_exception

from .env import get_env_flags

_HTTP_FIELDS = {
    "method": "http_method",
    "path": "path",
    "status": "status_code",
    "client_ip": "client_ip",
    "user_agent": "user_agent",
    "duration_ms": "duration_ms",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for prod and CI logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "pid": record.process,
            "message": record.getMessage(),
        }

        req_id = getattr(record, "request_id", None)
        if req_id is not None:
            payload["request_id"] = req_id

        document_id = getattr(record, "document_id", None)
        if document_id is not None:
            payload["document_id"] = document_id

        # HTTP context is only present on access-log records
        http_ctx = {
            key: getattr(record, attr)
            for key, attr in _HTTP_FIELDS.items()
            if getattr(record, attr, None) is not None
        }
        if http_ctx:
            payload["http"] = http_ctx

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            stack = "".join(format_exception(*record.exc_info))
            max_stack = int(os.getenv("LOG_STACK_LIMIT", "4000"))
            err_obj: dict[str, object] = {
                "stack": stack[:max_stack] + ("...(truncated)" if len(stack) > max_stack else ""),
            }
            if exc_type:
                err_obj["type"] = exc_type.__name__
            if exc_value:
                err_obj["message"] = str(exc_value)
            payload["error"] = err_obj

        return json.dumps(payload, ensure_ascii=False, default=str)


def read_level(explicit: str | None = None) -> str:
    level = explicit or os.getenv("LOG_LEVEL")
    if level:
        return level.upper()
    flags = get_env_flags()
    return "INFO" if flags.is_prod else "DEBUG"


def read_format(explicit: str | None = None) -> str:
    fmt = explicit or os.getenv("LOG_FORMAT")
    if fmt:
        return fmt.lower()
    return "json" if get_env_flags().is_prod else "plain"


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    level = read_level(level)
    formatter_name = "json" if read_format(fmt) == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,  # keep uvicorn & friends
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s [pid:%(process)d] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter_name,
                }
            },
            "root": {
                "level": level,
                "handlers": ["stream"],
            },
            # uvicorn bubbles up to root; the access middleware replaces uvicorn.access
            "loggers": {
                "uvicorn": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.error": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.access": {"level": "WARNING", "handlers": [], "propagate": True},
                "sqlalchemy.engine": {"level": "WARNING", "handlers": [], "propagate": True},
            },
        }
    )
