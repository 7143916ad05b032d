import asyncio

import httpx

from .config import Settings, get_settings

_client: httpx.AsyncClient | None = None
_client_lock = asyncio.Lock()


def build_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    settings = settings or get_settings()
    limits = httpx.Limits(
        max_connections=settings.http_max_connections,
        max_keepalive_connections=settings.http_max_keepalive,
    )
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        limits=limits,
        headers={"User-Agent": settings.http_user_agent},
    )


async def get_http_client() -> httpx.AsyncClient:
    """Client shared by the web app; the command line builds its own."""
    global _client

    if _client is None:
        async with _client_lock:
            if _client is None:
                _client = build_http_client()
    return _client


async def shutdown_http_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
