"""JsonFetcher factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from core.config import Config
from core.protocols import CompletionExecutor, FetchLogger
from services.fetcher import JsonFetcher
from services.transport import HttpxTransport


def create_client(config: Config, **kwargs) -> httpx.AsyncClient:
    """Build the shared httpx client from configuration."""
    limits = httpx.Limits(
        max_connections=config.limits.max_connections,
        max_keepalive_connections=config.limits.max_keepalive_connections,
    )
    return httpx.AsyncClient(
        timeout=config.fetch.timeout,
        limits=limits,
        follow_redirects=config.fetch.follow_redirects,
        headers=config.fetch.headers,
        **kwargs,
    )


@asynccontextmanager
async def open_fetcher(
    config: Config,
    logger: FetchLogger | None = None,
    executor: CompletionExecutor | None = None,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[JsonFetcher]:
    """Yield a JsonFetcher whose httpx client is closed on exit.

    A caller-supplied ``client`` is used as is and left open.
    """
    owned = client is None
    client = client or create_client(config)
    try:
        yield JsonFetcher(HttpxTransport(client), executor=executor, logger=logger)
    finally:
        if owned:
            await client.aclose()
