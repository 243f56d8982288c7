"""Cliente HTTP compartilhado pelas chamadas ao webservice SOAP."""
from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from app.core.config import settings

_client: Optional[httpx.AsyncClient] = None
_client_lock = asyncio.Lock()

DEFAULT_TIMEOUT = httpx.Timeout(settings.soap_timeout_seconds, connect=settings.soap_probe_timeout_seconds)
DEFAULT_HEADERS = {"User-Agent": "api-banguat-tipocambio/1.0", "Accept": "text/xml"}


async def get_async_client() -> httpx.AsyncClient:
    """Devolve o AsyncClient único do processo, criando-o na primeira chamada."""
    global _client
    if _client is not None:
        return _client

    async with _client_lock:
        if _client is None:
            _client = httpx.AsyncClient(
                timeout=DEFAULT_TIMEOUT,
                headers=DEFAULT_HEADERS,
            )
        return _client


async def close_async_client() -> None:
    global _client
    async with _client_lock:
        if _client is not None:
            await _client.aclose()
            _client = None
