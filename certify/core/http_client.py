"""
HTTP Client Module

Provides a globally shared httpx.AsyncClient with:
- Connection pooling for efficient reuse
- Configurable timeouts

Requests are never retried; a failed upstream call is reported to the caller.
"""

from typing import Optional

import httpx


# ============== Configuration ==============

# Connection pool limits
MAX_CONNECTIONS = 20
MAX_KEEPALIVE_CONNECTIONS = 5
KEEPALIVE_EXPIRY = 30  # seconds

# Uploads of full-size certificates can be slow
DEFAULT_TIMEOUT = 60.0  # seconds


# ============== Global Client Instance ==============

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """
    Get or create the global async HTTP client.

    Returns:
        httpx.AsyncClient: Shared client instance.
    """
    global _http_client
    if _http_client is None:
        limits = httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            keepalive_expiry=KEEPALIVE_EXPIRY,
        )
        timeout = httpx.Timeout(DEFAULT_TIMEOUT)

        _http_client = httpx.AsyncClient(
            limits=limits,
            timeout=timeout,
            http2=True,
        )
    return _http_client


async def close_http_client() -> None:
    """
    Close the global HTTP client.

    Should be called during application shutdown.
    """
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
