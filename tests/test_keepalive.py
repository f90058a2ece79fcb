"""Tests for the keepalive self-ping."""

import asyncio

import httpx
import pytest
from httpx import ASGITransport

from rgbreg.keepalive import ping_once, ping_url, run_keepalive


def test_ping_url_joins_origin():
    assert ping_url("https://reg.example.com") == "https://reg.example.com/ping"
    assert ping_url("https://reg.example.com/") == "https://reg.example.com/ping"


@pytest.mark.asyncio
async def test_pings_until_limit():
    """Test each interval produces one GET of /ping."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text="Pong!")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        successes = await run_keepalive("http://reg.example", 0, client=client, max_pings=3)

    assert successes == 3
    assert seen == ["http://reg.example/ping"] * 3


@pytest.mark.asyncio
async def test_failures_do_not_stop_loop():
    """Test error statuses and connection errors are logged and skipped."""
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        if len(attempts) == 2:
            return httpx.Response(503)
        return httpx.Response(200, text="Pong!")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        successes = await run_keepalive("http://reg.example", 0, client=client, max_pings=3)

    assert len(attempts) == 3
    assert successes == 1


@pytest.mark.asyncio
async def test_ping_once_reports_status():
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(500))
    ) as client:
        assert await ping_once(client, "http://reg.example/ping") is False


@pytest.mark.asyncio
async def test_pings_the_service_itself(test_app):
    """Test the keepalive target is served by the API."""
    async with httpx.AsyncClient(transport=ASGITransport(app=test_app)) as client:
        successes = await run_keepalive("http://test", 0, client=client, max_pings=2)

    assert successes == 2


@pytest.mark.asyncio
async def test_cancellation_stops_loop():
    """Test the task exits promptly when cancelled at shutdown."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200))
    ) as client:
        task = asyncio.create_task(run_keepalive("http://reg.example", 3600, client=client))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
