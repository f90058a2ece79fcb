"""Periodic self-ping that keeps a hosted instance from idling out."""

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

PING_TIMEOUT_S = 10.0


def ping_url(origin: str) -> str:
    return origin.rstrip("/") + "/ping"


async def ping_once(client: httpx.AsyncClient, url: str) -> bool:
    """GET the ping endpoint once.

    Returns:
        True if the endpoint answered with a 2xx status
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Self-ping failed: %s", e)
        return False

    logger.info("Self-ping successful")
    return True


async def run_keepalive(
    origin: str,
    interval: float,
    client: Optional[httpx.AsyncClient] = None,
    max_pings: Optional[int] = None,
) -> int:
    """Ping ``origin``/ping every ``interval`` seconds until cancelled.

    Args:
        origin: Externally reachable base URL of this service
        interval: Seconds to wait before each ping
        client: HTTP client to use; one is created and closed if omitted
        max_pings: Stop after this many attempts (None = run forever)

    Returns:
        Number of successful pings
    """
    url = ping_url(origin)
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=PING_TIMEOUT_S)

    logger.info("Keepalive enabled: %s every %ss", url, interval)
    attempts = 0
    successes = 0
    try:
        while max_pings is None or attempts < max_pings:
            await asyncio.sleep(interval)
            attempts += 1
            if await ping_once(client, url):
                successes += 1
    finally:
        if owns_client:
            await client.aclose()

    return successes
