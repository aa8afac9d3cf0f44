"""In-process TTL cache, the default permission cache for a single API instance"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class LocalTTLCache:
    """
    Time-boxed in-memory map with the same async surface as CacheService.

    Entries expire passively: an expired entry is dropped the next time it is read.
    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 10_000,
    ):
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, Any]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def is_available(self) -> bool:
        return True

    def lock(self, key: str) -> asyncio.Lock:
        """Lock guarding the check-then-fill sequence for one key"""
        return self._locks.setdefault(key, asyncio.Lock())

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            logger.debug("Cache EXPIRED: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        if len(self._entries) >= self._max_entries and key not in self._entries:
            self._evict_expired()
            if len(self._entries) >= self._max_entries:
                # Still full: drop the entry closest to expiry
                oldest = min(self._entries, key=lambda k: self._entries[k][0])
                self._entries.pop(oldest, None)
        self._entries[key] = (self._clock() + ttl, value)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]:
            self._entries.pop(key, None)
