import httpx
import pytest

from doc_vault.http import get_default_timeout_seconds, new_async_httpx_client, new_httpx_client


@pytest.mark.parametrize("val", ["0.123", "2.5", "10"])  # string env values
def test_sync_client_uses_env_timeout(monkeypatch, val):
    monkeypatch.setenv("HTTP_CLIENT_TIMEOUT_SECONDS", val)
    client = new_httpx_client()
    try:
        assert isinstance(client.timeout, httpx.Timeout)
        expected = float(val)
        assert client.timeout.connect == pytest.approx(expected)
        assert client.timeout.read == pytest.approx(expected)
        assert client.timeout.write == pytest.approx(expected)
        assert client.timeout.pool == pytest.approx(expected)
    finally:
        client.close()


@pytest.mark.asyncio
async def test_async_client_uses_env_timeout(monkeypatch):
    monkeypatch.setenv("HTTP_CLIENT_TIMEOUT_SECONDS", "0.321")
    async with new_async_httpx_client() as client:
        assert client.timeout.read == pytest.approx(0.321)


def test_explicit_timeout_wins(monkeypatch):
    monkeypatch.setenv("HTTP_CLIENT_TIMEOUT_SECONDS", "5")
    with new_httpx_client(timeout_seconds=1.5, base_url="http://example.test") as client:
        assert client.timeout.read == pytest.approx(1.5)
        assert str(client.base_url) == "http://example.test"


def test_default_timeout_pick(monkeypatch):
    # When env unset, returns a sane default (10.0)
    monkeypatch.delenv("HTTP_CLIENT_TIMEOUT_SECONDS", raising=False)
    assert get_default_timeout_seconds() == pytest.approx(10.0)


def test_bad_env_value_falls_back(monkeypatch):
    monkeypatch.setenv("HTTP_CLIENT_TIMEOUT_SECONDS", "soon")
    assert get_default_timeout_seconds() == pytest.approx(10.0)
