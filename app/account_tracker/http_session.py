import asyncio
from typing import Any, Mapping

import aiohttp

from app.account_tracker.errors import FetchError
from app.account_tracker.media import ImageHandle
from app.logger import logger

_session: aiohttp.ClientSession | None = None


def get_session() -> aiohttp.ClientSession:
    global _session
    if _session and not _session.closed:
        return _session
    timeout = aiohttp.ClientTimeout(total=30, connect=10, sock_connect=10, sock_read=20)
    connector = aiohttp.TCPConnector(limit=100, ttl_dns_cache=300)
    _session = aiohttp.ClientSession(timeout=timeout, connector=connector)
    return _session


async def close_session():
    global _session
    if _session and not _session.closed:
        await _session.close()
    _session = None


async def fetch_json(url: str, params: Mapping[str, Any] | None = None) -> Any:
    """
    GET ``url`` and decode the body as JSON.
    :raises FetchError: on non-2xx status, transport error, timeout or invalid JSON.
    """
    session = get_session()
    try:
        async with session.get(url, params=params) as resp:
            if not 200 <= resp.status < 300:
                raise FetchError(url, resp.status, resp.reason or "unexpected status")
            try:
                return await resp.json(content_type=None)
            except ValueError as e:
                raise FetchError(url, resp.status, f"invalid JSON body: {e}") from e
    except aiohttp.ClientError as e:
        logger.warning(f"HTTP error fetching {url}: {e}")
        raise FetchError(url, reason=str(e)) from e
    except asyncio.TimeoutError as e:
        logger.warning(f"Timeout fetching {url}")
        raise FetchError(url, reason="timeout") from e


async def fetch_binary(url: str, params: Mapping[str, Any] | None = None, stem: str = "avatar") -> ImageHandle:
    """
    GET ``url`` and keep the body in memory.
    The returned handle must be released by the caller.
    :raises FetchError: on non-2xx status, transport error, timeout or empty body.
    """
    session = get_session()
    try:
        async with session.get(url, params=params) as resp:
            if not 200 <= resp.status < 300:
                raise FetchError(url, resp.status, resp.reason or "unexpected status")
            data = await resp.read()
            if not data:
                raise FetchError(url, resp.status, "empty body")
            return ImageHandle(data, content_type=resp.headers.get("Content-Type"), stem=stem)
    except aiohttp.ClientError as e:
        logger.warning(f"HTTP error fetching {url}: {e}")
        raise FetchError(url, reason=str(e)) from e
    except asyncio.TimeoutError as e:
        logger.warning(f"Timeout fetching {url}")
        raise FetchError(url, reason="timeout") from e
