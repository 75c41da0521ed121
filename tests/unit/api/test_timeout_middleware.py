import asyncio

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport
from starlette.responses import StreamingResponse
from starlette.testclient import TestClient

from doc_vault.api.fastapi.middleware.errors.handlers import register_error_handlers
from doc_vault.api.fastapi.middleware.timeout import BodyReadTimeoutMiddleware, HandlerTimeoutMiddleware


def test_handler_timeout_returns_504_envelope():
    # Build a minimal app with a very small handler timeout
    app = FastAPI()
    app.add_middleware(HandlerTimeoutMiddleware, timeout_seconds=0.01)
    register_error_handlers(app)

    @app.get("/slow")
    async def _slow():
        await asyncio.sleep(0.2)
        return {"ok": True}

    with TestClient(app) as client:
        r = client.get("/slow")
        assert r.status_code == 504
        assert r.json() == {"success": False, "message": "The request took too long to complete."}


def test_fast_handler_is_untouched():
    app = FastAPI()
    app.add_middleware(HandlerTimeoutMiddleware, timeout_seconds=1.0)

    @app.get("/fast")
    async def _fast():
        return {"ok": True}

    assert TestClient(app).get("/fast").json() == {"ok": True}


def test_streaming_response_outlasting_timeout_is_complete():
    app = FastAPI()
    app.add_middleware(HandlerTimeoutMiddleware, timeout_seconds=0.1)

    @app.get("/stream")
    async def _stream():
        async def chunks():
            for i in range(4):
                await asyncio.sleep(0.05)
                yield f"part{i};".encode()

        return StreamingResponse(chunks(), media_type="application/octet-stream")

    with TestClient(app) as client:
        r = client.get("/stream")

    assert r.status_code == 200
    assert r.content == b"part0;part1;part2;part3;"


@pytest.mark.asyncio
async def test_slow_handler_after_body_still_times_out():
    app = FastAPI()
    app.add_middleware(HandlerTimeoutMiddleware, timeout_seconds=0.05)
    register_error_handlers(app)

    @app.post("/echo")
    async def _echo(payload: dict):  # noqa: ANN001
        await asyncio.sleep(0.3)
        return payload

    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        r = await client.post("/echo", json={"a": 1})

    assert r.status_code == 504


@pytest.mark.asyncio
async def test_body_read_timeout_returns_408_envelope():
    app = FastAPI()
    app.add_middleware(BodyReadTimeoutMiddleware, timeout_seconds=0.05)

    @app.post("/echo")
    async def _accept(payload: dict):  # noqa: ANN001
        return {"ok": True, "payload": payload}

    # stream the request body slowly through ASGITransport
    async with httpx.AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:

        async def gen():
            yield b'{"a":'
            await asyncio.sleep(0.2)
            yield b"1}"

        r = await client.post("/echo", content=gen(), headers={"content-type": "application/json"})
        assert r.status_code == 408
        assert r.json() == {"success": False, "message": "Timed out while reading request body."}


@pytest.mark.asyncio
async def test_stalled_upload_leaves_no_file(make_app, upload_dir):
    from doc_vault.app.settings import AppSettings

    app = make_app(app_settings=AppSettings(body_timeout_seconds=0.05))
    boundary = "vaultboundary"
    head = (
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="file"; filename="slow.pdf"\r\n'
        "Content-Type: application/pdf\r\n\r\n"
    ).encode()

    async def gen():
        yield head + b"%PDF-1.4\n" + b"0" * 1024
        await asyncio.sleep(0.3)
        yield b"\r\n--" + boundary.encode() + b"--\r\n"

    async with app.router.lifespan_context(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            r = await client.post(
                "/api/documents/upload",
                content=gen(),
                headers={"content-type": f"multipart/form-data; boundary={boundary}"},
            )
            listed = await client.get("/api/documents")

    assert r.status_code == 408
    assert listed.json()["data"] == []
    assert list(upload_dir.iterdir()) == []


def _multipart(boundary: str, filename: str, content_type: str = "application/pdf") -> tuple[bytes, bytes]:
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="file"; filename="{filename}"\r\n'
        f"Content-Type: {content_type}\r\n\r\n"
    ).encode()
    return head, f"\r\n--{boundary}--\r\n".encode()


@pytest.mark.asyncio
async def test_slow_steady_upload_is_not_timed_out(make_app, upload_dir):
    from doc_vault.app.settings import AppSettings

    app = make_app(app_settings=AppSettings(request_timeout_seconds=0.5))
    boundary = "vaultboundary"
    head, tail = _multipart(boundary, "steady.pdf")
    payload = b"%PDF-1.4\n" + b"0" * (5 * 1024 - 9)

    async def gen():
        yield head
        for i in range(0, len(payload), 1024):
            await asyncio.sleep(0.15)
            yield payload[i:i + 1024]
        yield tail

    async with app.router.lifespan_context(app):
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            r = await client.post(
                "/api/documents/upload",
                content=gen(),
                headers={"content-type": f"multipart/form-data; boundary={boundary}"},
            )
            listed = await client.get("/api/documents")

    assert r.status_code == 200, r.text
    assert r.json()["data"]["fileSize"] == len(payload)
    assert [d["originalName"] for d in listed.json()["data"]] == ["steady.pdf"]
    assert len(list(upload_dir.iterdir())) == 1
