"""Tests for HTTP retry helper."""

import httpx
import pytest

from connected_accounts.services import http_service
from connected_accounts.services.http_service import request_with_retries


@pytest.mark.asyncio
async def test_request_with_retries_retries_on_status():
    req = httpx.Request("POST", "https://example.com")
    responses = [
        httpx.Response(500, request=req),
        httpx.Response(200, json={"ok": True}, request=req),
    ]
    calls = {"count": 0}

    async def request_fn():
        calls["count"] += 1
        return responses.pop(0)

    response = await request_with_retries(
        request_fn,
        max_attempts=2,
        base_delay=0,
        max_delay=0,
    )

    assert calls["count"] == 2
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_request_with_retries_retries_on_request_error():
    req = httpx.Request("POST", "https://example.com")
    calls = {"count": 0}

    async def request_fn():
        calls["count"] += 1
        if calls["count"] == 1:
            raise httpx.ConnectError("boom", request=req)
        return httpx.Response(200, json={"ok": True}, request=req)

    response = await request_with_retries(
        request_fn,
        max_attempts=2,
        base_delay=0,
        max_delay=0,
    )

    assert calls["count"] == 2
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_request_with_retries_raises_after_max_attempts():
    req = httpx.Request("POST", "https://example.com")
    calls = {"count": 0}

    async def request_fn():
        calls["count"] += 1
        raise httpx.ConnectError("boom", request=req)

    with pytest.raises(httpx.RequestError):
        await request_with_retries(
            request_fn,
            max_attempts=2,
            base_delay=0,
            max_delay=0,
        )

    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_request_with_retries_honors_retry_after(monkeypatch):
    req = httpx.Request("GET", "https://gmail.googleapis.com")
    responses = [
        httpx.Response(429, headers={"Retry-After": "2"}, request=req),
        httpx.Response(200, json={"ok": True}, request=req),
    ]
    delays: list[float] = []

    async def fake_sleep(delay):
        delays.append(delay)

    async def request_fn():
        return responses.pop(0)

    monkeypatch.setattr(http_service.asyncio, "sleep", fake_sleep)

    response = await request_with_retries(request_fn, max_attempts=2, max_delay=4.0)

    assert response.status_code == 200
    assert delays == [2.0]


@pytest.mark.asyncio
async def test_request_with_retries_returns_last_error_response():
    req = httpx.Request("GET", "https://gmail.googleapis.com")

    async def request_fn():
        return httpx.Response(503, request=req)

    response = await request_with_retries(
        request_fn,
        max_attempts=2,
        base_delay=0,
        max_delay=0,
    )

    assert response.status_code == 503
