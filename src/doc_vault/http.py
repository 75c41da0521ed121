from __future__ import annotations

import os

import httpx


def get_default_timeout_seconds() -> float:
    raw = os.getenv("HTTP_CLIENT_TIMEOUT_SECONDS")
    if raw is None:
        return 10.0
    try:
        return float(raw)
    except ValueError:
        return 10.0


def new_httpx_client(*, base_url: str = "", timeout_seconds: float | None = None, **kwargs) -> httpx.Client:
    timeout = httpx.Timeout(timeout_seconds if timeout_seconds is not None else get_default_timeout_seconds())
    return httpx.Client(base_url=base_url, timeout=timeout, **kwargs)


def new_async_httpx_client(
    *, base_url: str = "", timeout_seconds: float | None = None, **kwargs
) -> httpx.AsyncClient:
    timeout = httpx.Timeout(timeout_seconds if timeout_seconds is not None else get_default_timeout_seconds())
    return httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)
