"""
Shared HTTP connection pool and a small fetcher for whole response bodies.
"""

import asyncio
import logging

import aiohttp

log = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})

_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool() -> aiohttp.ClientSession:
    """Returns the process-wide ClientSession, opening it on first use."""
    global _pool
    async with _pool_lock:
        if _pool is None or _pool.closed:
            _pool = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(
                    limit=4,
                    ttl_dns_cache=600,
                    keepalive_timeout=30,
                ),
                timeout=aiohttp.ClientTimeout(sock_connect=15, sock_read=60),
            )
            log.debug("Opened shared HTTP connection pool")
        return _pool


async def close_connection_pool() -> None:
    global _pool
    async with _pool_lock:
        pool, _pool = _pool, None
    if pool is not None and not pool.closed:
        await pool.close()
        log.debug("Closed shared HTTP connection pool")


def _is_retryable(error: BaseException) -> bool:
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status in RETRYABLE_STATUSES
    return True


class Downloader:
    """
    Fetches whole response bodies, retrying transient failures with
    exponential backoff.

    Connection errors, timeouts and the statuses in RETRYABLE_STATUSES are
    retried until max_attempts is reached. Any other HTTP error is raised at
    once.
    """

    def __init__(self, max_attempts: int = 3, base_delay: float = 1.5):
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    async def fetch_bytes(self, url: str, headers: dict[str, str] | None = None) -> bytes:
        attempt = 1
        while True:
            session = await get_connection_pool()
            try:
                async with session.get(url, headers=headers) as response:
                    response.raise_for_status()
                    return await response.read()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if attempt >= self.max_attempts or not _is_retryable(e):
                    raise
                delay = self.base_delay * 2 ** (attempt - 1)
                log.debug(
                    f"Fetching '{url}' failed ({e}), attempt "
                    f"{attempt}/{self.max_attempts}; retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
                attempt += 1
