"""Access token providers used to authenticate secrets API calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Final, Protocol

from cachetools import TTLCache

from ..exceptions import TokenAcquisitionError

_CACHE_KEY: Final[str] = "access_token"

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    """Async callable returning a bearer token, raising when none is available."""

    def __call__(self) -> Awaitable[str]: ...


class StaticTokenProvider:
    """Always hands out the same pre-issued token."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    async def __call__(self) -> str:
        if not self._token:
            raise TokenAcquisitionError("No access token configured")
        return self._token


class CachedTokenProvider:
    """Caches tokens from ``fetch`` in a ``cachetools.TTLCache``.

    Concurrent callers share a single in-flight fetch through the lock, so an
    expired token is refreshed once rather than once per waiting request.
    """

    def __init__(self, fetch: Callable[[], Awaitable[str]], ttl_seconds: int) -> None:
        self._fetch = fetch
        self._cache: TTLCache[str, str] = TTLCache(maxsize=1, ttl=ttl_seconds)
        self._lock = asyncio.Lock()

    async def __call__(self) -> str:
        async with self._lock:
            token = self._cache.get(_CACHE_KEY)
            if token is not None:
                return token

            try:
                token = await self._fetch()
            except TokenAcquisitionError:
                raise
            except Exception as exc:
                raise TokenAcquisitionError(f"Identity provider failed: {exc}") from exc
            if not token:
                raise TokenAcquisitionError("Identity provider returned an empty token")

            logger.debug("Fetched new access token")
            self._cache[_CACHE_KEY] = token
            return token

    async def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a fresh one."""

        async with self._lock:
            self._cache.clear()


__all__ = [
    "CachedTokenProvider",
    "StaticTokenProvider",
    "TokenProvider",
]
