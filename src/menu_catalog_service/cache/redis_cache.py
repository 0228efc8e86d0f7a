"""Redis cache backend for multi-instance deployments."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.errors import CacheProviderError

logger = logging.getLogger(__name__)

R = TypeVar("R")

GLOB_SPECIAL_CHARS = "\\*?[]"


def escape_glob(value: str) -> str:
    """Escape Redis MATCH glob metacharacters so ``value`` matches literally."""
    return "".join(f"\\{char}" if char in GLOB_SPECIAL_CHARS else char for char in value)


class RedisCacheProvider(CacheProvider):
    """Cache backed by a shared Redis instance.

    Construction never raises. ``start()`` connects in a background task that retries
    with backoff. An operation issued while disconnected tries one ping itself and
    raises ``CacheProviderError`` if that fails; a dropped connection flips the
    provider back to disconnected and schedules a reconnect. A provider reused across
    event loops gets a fresh client on the new loop.
    """

    backend_name = "redis"
    scan_batch_size = 100

    def __init__(
        self,
        redis_url: str,
        reconnect_delay_seconds: float = 1.0,
        max_reconnect_delay_seconds: float = 30.0,
    ) -> None:
        """Initialize the Redis cache.

        Args:
            redis_url: Redis connection URL (``rediss://`` enables TLS)
            reconnect_delay_seconds: Initial delay between connection attempts
            max_reconnect_delay_seconds: Upper bound for the backoff delay
        """
        self.redis_url = redis_url
        self.reconnect_delay_seconds = reconnect_delay_seconds
        self.max_reconnect_delay_seconds = max_reconnect_delay_seconds
        self.client: redis.Redis = self._create_client()
        self._connected = False
        self._connect_task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _create_client(self) -> redis.Redis:
        return redis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )

    def _bind_to_running_loop(self) -> None:
        """Rebuild the client when called from a different event loop.

        Pooled connections belong to the loop that opened them. A Lambda container
        runs each invocation under a fresh ``asyncio.run`` loop.
        """
        loop = asyncio.get_running_loop()
        if self._loop is not None and self._loop is not loop:
            logger.info("Event loop changed, recreating Redis client")
            self.client = self._create_client()
            self._connected = False
            self._connect_task = None
        self._loop = loop

    @property
    def connected(self) -> bool:
        """Whether the last connection attempt succeeded and no failure followed."""
        return self._connected

    async def start(self) -> None:
        """Begin connecting in the background."""
        self._bind_to_running_loop()
        self._schedule_connect()

    async def close(self) -> None:
        """Stop reconnect attempts and close the client."""
        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
        await self.client.aclose()
        self._connected = False
        logger.info("Redis cache closed")

    def _schedule_connect(self) -> None:
        if self._connect_task is None or self._connect_task.done():
            self._connect_task = asyncio.get_running_loop().create_task(self._connect_loop())

    async def _try_connect(self) -> bool:
        try:
            await self.client.ping()
        except RedisError as e:
            logger.error(f"Redis connection failed: {e}")
            return False

        self._connected = True
        logger.info("Redis cache connected")
        return True

    async def _connect_loop(self) -> None:
        delay = self.reconnect_delay_seconds
        while not await self._try_connect():
            logger.warning(f"Retrying Redis connection in {delay:.1f}s")
            await asyncio.sleep(delay)
            delay = min(delay * 2, self.max_reconnect_delay_seconds)

    async def _execute(self, operation: str, call: Callable[[], Awaitable[R]]) -> R:
        self._bind_to_running_loop()
        if not self._connected and not await self._try_connect():
            self._schedule_connect()
            raise CacheProviderError(f"Redis {operation} failed: not connected")

        try:
            return await call()
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error(f"Redis {operation} lost connection: {e}")
            self._connected = False
            self._schedule_connect()
            raise CacheProviderError(f"Redis {operation} failed: {e}") from e
        except RedisError as e:
            logger.error(f"Redis {operation} failed: {e}")
            raise CacheProviderError(f"Redis {operation} failed: {e}") from e

    async def get(self, key: str) -> Any | None:
        raw = await self._execute("get", lambda: self.client.get(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        payload = json.dumps(value)
        await self._execute("set", lambda: self.client.setex(key, ttl_seconds, payload))

    async def delete(self, key: str) -> bool:
        removed = await self._execute("delete", lambda: self.client.delete(key))
        return removed > 0

    async def has(self, key: str) -> bool:
        exists = await self._execute("has", lambda: self.client.exists(key))
        return exists == 1

    async def clear(self, prefix: str | None = None) -> None:
        if not prefix:
            await self._execute("clear", lambda: self.client.flushdb())
            return

        await self._execute("clear", lambda: self._scan_and_delete(prefix))

    async def _scan_and_delete(self, prefix: str) -> None:
        """Delete keys under ``prefix`` one SCAN batch at a time."""
        pattern = f"{escape_glob(prefix)}*"
        cursor = 0
        removed = 0
        while True:
            cursor, keys = await self.client.scan(
                cursor=cursor, match=pattern, count=self.scan_batch_size
            )
            if keys:
                removed += await self.client.delete(*keys)
            if cursor == 0:
                break

        logger.debug(f"Cleared {removed} Redis keys with prefix {prefix}")
