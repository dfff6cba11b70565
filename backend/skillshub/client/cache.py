"""
Short-lived response cache for rarely-changing lookup data.

Concurrent requests for the same missing key share one in-flight fetch.
Failures are never cached.
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional
from urllib.parse import urlencode

from skillshub.config import settings

logger = logging.getLogger(__name__)


class RequestCache:
    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = settings.reference_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._inflight: dict[str, asyncio.Future] = {}
        self._generation = 0
        self._key_generations: dict[str, int] = {}

    @staticmethod
    def make_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """`endpoint?k=v&...` with params sorted and None values dropped."""
        if not params:
            return endpoint
        pairs = sorted((k, str(v)) for k, v in params.items() if v is not None)
        return f"{endpoint}?{urlencode(pairs)}" if pairs else endpoint

    def peek(self, key: str) -> Optional[Any]:
        """Fresh cached value, or None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def _stamp(self, key: str) -> tuple[int, int]:
        return self._generation, self._key_generations.get(key, 0)

    async def get_or_fetch(self, key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        cached = self.peek(key)
        if cached is not None:
            return cached

        inflight = self._inflight.get(key)
        if inflight is None:
            inflight = asyncio.ensure_future(self._fetch(key, fetcher, self._stamp(key)))
            self._inflight[key] = inflight
        else:
            logger.debug(f"Joining in-flight fetch for {key}")

        return await asyncio.shield(inflight)

    async def _fetch(self, key: str, fetcher: Callable[[], Awaitable[Any]], stamp: tuple[int, int]) -> Any:
        try:
            value = await fetcher()
        finally:
            # invalidate() may already have replaced this fetch with a newer one
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

        # An invalidate() while the fetch ran means this value is already stale
        if stamp == self._stamp(key):
            self._entries[key] = (self._clock() + self.ttl_seconds, value)
        return value

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or everything when no key is given. In-flight fetches are not stored."""
        if key is None:
            self._entries.clear()
            self._inflight.clear()
            self._generation += 1
        else:
            self._entries.pop(key, None)
            self._inflight.pop(key, None)
            self._key_generations[key] = self._key_generations.get(key, 0) + 1
