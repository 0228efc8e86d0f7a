"""In-process cache backend for single-instance deployments."""

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from menu_catalog_service.cache.base_cache import CacheProvider

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    payload: str
    expires_at: float


class MemoryCacheProvider(CacheProvider):
    """Dictionary-backed cache with per-key expiry.

    Values are stored as JSON text, so every read returns an independent copy and
    non-serializable values are rejected at write time, matching the networked backends.
    Expired entries are dropped lazily on access.
    """

    backend_name = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the memory cache.

        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Any | None:
        entry = self._live_entry(key)
        if entry is None:
            return None
        return json.loads(entry.payload)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = _Entry(
            payload=json.dumps(value),
            expires_at=self._clock() + ttl_seconds,
        )

    async def delete(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        return entry is not None and entry.expires_at > self._clock()

    async def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def clear(self, prefix: str | None = None) -> None:
        if not prefix:
            self._entries.clear()
            return

        matching = [key for key in self._entries if key.startswith(prefix)]
        for key in matching:
            del self._entries[key]

        logger.debug(f"Cleared {len(matching)} in-memory keys with prefix {prefix}")
