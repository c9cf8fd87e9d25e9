"""Thread-safe read-through cache for catalog queries.

Entries are keyed on ``(resource, normalized filters)`` so that
``("motorcycles", {"make": "Kawasaki"})`` and
``("motorcycles", {"make": " kawasaki "})`` share one entry. Admin writes
drop whole resources with ``invalidate``.
"""

import logging
import threading
from typing import Any, Awaitable, Callable

from cachetools import TTLCache

logger = logging.getLogger(__name__)

CacheKey = tuple[str, tuple[tuple[str, Any], ...]]


class CatalogCache:
    """TTL cache with per-resource invalidation."""

    def __init__(self, maxsize: int = 128, ttl: int = 300) -> None:
        """Initialize the cache.

        Args:
            maxsize: Max entries across all resources.
            ttl: Time-to-live in seconds (default 5 minutes).
        """
        self._cache: TTLCache[CacheKey, Any] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    @staticmethod
    def make_key(resource: str, filters: dict[str, Any] | None = None) -> CacheKey:
        """Build a cache key; string values are lowered/stripped, None values dropped."""

        def _norm(val: Any) -> Any:
            if isinstance(val, str):
                return val.lower().strip()
            if isinstance(val, (list, tuple)):
                return tuple(sorted(_norm(v) for v in val))
            return val

        items = tuple(
            sorted((k, _norm(v)) for k, v in (filters or {}).items() if v is not None)
        )
        return (resource, items)

    def get(self, key: CacheKey) -> Any | None:
        """Get a cached value (thread-safe). Returns None on miss."""
        with self._lock:
            return self._cache.get(key)

    def set(self, key: CacheKey, value: Any) -> None:
        """Store a value (thread-safe)."""
        with self._lock:
            self._cache[key] = value
        logger.debug("Catalog cache set: %s", key)

    async def get_or_load(
        self,
        resource: str,
        filters: dict[str, Any] | None,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached value or await ``loader`` and cache its result.

        Failed loads are not cached, so the next request retries.
        """
        key = self.make_key(resource, filters)
        cached = self.get(key)
        if cached is not None:
            logger.debug("Catalog cache hit: %s", key)
            return cached
        value = await loader()
        if value is not None:
            self.set(key, value)
        return value

    def invalidate(self, resource: str | None = None) -> int:
        """Drop one resource's entries, or everything. Returns entries removed."""
        with self._lock:
            if resource is None:
                removed = len(self._cache)
                self._cache.clear()
            else:
                keys = [k for k in list(self._cache.keys()) if k[0] == resource]
                for k in keys:
                    self._cache.pop(k, None)
                removed = len(keys)
        logger.debug("Catalog cache invalidated: resource=%s removed=%d", resource, removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
