from __future__ import annotations

from fastapi import FastAPI
from starlette.testclient import TestClient

from doc_vault.api.fastapi.middleware.request_size_limit import RequestSizeLimitMiddleware


def test_request_size_limit_blocks_large_payload():
    app = FastAPI()
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=10)

    @app.post("/echo")
    def echo(body: dict):
        return body

    c = TestClient(app)
    # small request
    assert c.post("/echo", content=b"{}", headers={"content-type": "application/json"}).status_code == 200
    # large request
    r2 = c.post("/echo", json={"big": "x" * 100})
    assert r2.status_code == 413
    assert r2.json() == {"success": False, "message": "Request body exceeds allowed size."}


def test_request_size_limit_custom_status_and_message():
    app = FastAPI()
    app.add_middleware(
        RequestSizeLimitMiddleware, max_bytes=10, status_code=400, message="File too large. Maximum size is 10MB."
    )

    @app.post("/echo")
    def echo(body: dict):
        return body

    r = TestClient(app).post("/echo", json={"big": "x" * 100})
    assert r.status_code == 400
    assert r.json()["message"] == "File too large. Maximum size is 10MB."
