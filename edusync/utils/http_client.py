"""Shared persistent httpx clients for external API calls.

Persistent clients reuse TCP connections and TLS sessions across the
YouTube and email provider calls made during one process lifetime.
"""

import httpx

from edusync.constants import API_TIMEOUT_DEFAULT, API_TIMEOUT_EXTERNAL

# Connection pool limits
_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_youtube_client: httpx.AsyncClient | None = None
_general_client: httpx.AsyncClient | None = None


def get_youtube_client() -> httpx.AsyncClient:
    """Get persistent httpx client for YouTube Data API calls."""
    global _youtube_client
    if _youtube_client is None:
        _youtube_client = httpx.AsyncClient(
            timeout=API_TIMEOUT_EXTERNAL,
            limits=_POOL_LIMITS,
        )
    return _youtube_client


def get_general_client() -> httpx.AsyncClient:
    """Get persistent httpx client for other API calls (email provider)."""
    global _general_client
    if _general_client is None:
        _general_client = httpx.AsyncClient(
            timeout=API_TIMEOUT_DEFAULT,
            limits=_POOL_LIMITS,
        )
    return _general_client


async def close_all_clients() -> None:
    """Close all persistent httpx clients. Call during app shutdown."""
    global _youtube_client, _general_client
    if _youtube_client is not None:
        await _youtube_client.aclose()
        _youtube_client = None
    if _general_client is not None:
        await _general_client.aclose()
        _general_client = None
