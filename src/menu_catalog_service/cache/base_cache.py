"""Cache provider contract.

All backends store JSON-serializable values with a TTL and expose the same async
operations, so the catalog service never knows which one it is talking to.
"""

from abc import ABC, abstractmethod
from typing import Any


class CacheProvider(ABC):
    """Abstract base class for cache backends.

    Semantics every backend must honor:
    - ``get`` returns None on a miss or after the TTL elapsed; it never raises for a miss
    - ``set`` overwrites unconditionally
    - ``clear(prefix)`` removes exactly the keys starting with ``prefix``

    Networked backends raise ``CacheProviderError`` when the store is unreachable
    rather than reporting a miss.
    """

    backend_name = "abstract"

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve a cached value.

        Args:
            key: Cache key

        Returns:
            The stored value, or None if missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl_seconds: Seconds until the entry expires
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a single key.

        Returns:
            True if a key was actually removed
        """
        pass

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a key exists and has not expired."""
        pass

    @abstractmethod
    async def clear(self, prefix: str | None = None) -> None:
        """Remove every key starting with ``prefix``, or everything when omitted."""
        pass

    async def start(self) -> None:
        """Hook for backends that need to connect at startup."""
        return None

    async def close(self) -> None:
        """Hook for backends that hold connections."""
        return None
