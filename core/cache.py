# core/cache.py

"""
In-memory cache for resolved capability sets.

Entries are keyed by principal and expire after a TTL. Grant and revoke
operations clear the whole namespace once the store has committed, so the
next request re-derives capabilities from the grant tables.
"""

import time
from threading import Lock
from typing import Any, Optional

from core.logging_config import logger


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = time.monotonic() + ttl_seconds

    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class SimpleCache:
    """
    Thread-safe TTL cache with prefix invalidation.
    """

    def __init__(self):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = Lock()
        # Bumped on every invalidation; see set_if_generation.
        self._generation = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired():
                del self._cache[key]
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: int = 300):
        if ttl_seconds <= 0:
            return
        with self._lock:
            self._cache[key] = CacheEntry(value, ttl_seconds)

    def delete(self, key: str):
        with self._lock:
            self._cache.pop(key, None)

    def generation(self) -> int:
        with self._lock:
            return self._generation

    def set_if_generation(self, key: str, value: Any, ttl_seconds: int, generation: int) -> bool:
        """
        Store `value` only if no invalidation happened since `generation`
        was read. A value computed before an invalidation is never cached.
        """
        if ttl_seconds <= 0:
            return False
        with self._lock:
            if self._generation != generation:
                return False
            self._cache[key] = CacheEntry(value, ttl_seconds)
            return True

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key starting with `prefix`; returns how many were dropped."""
        with self._lock:
            self._generation += 1
            doomed = [key for key in self._cache if key.startswith(prefix)]
            for key in doomed:
                del self._cache[key]
        return len(doomed)

    def clear(self):
        with self._lock:
            self._generation += 1
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._cache)


# Global cache instance
_cache = SimpleCache()

CAPABILITY_PREFIX = "capabilities:"


def get_cache() -> SimpleCache:
    """Get the global cache instance."""
    return _cache


def capability_cache_key(principal_key: str) -> str:
    return f"{CAPABILITY_PREFIX}{principal_key}"


def cache_get(key: str) -> Optional[Any]:
    return _cache.get(key)


def cache_set(key: str, value: Any, ttl_seconds: int = 300):
    _cache.set(key, value, ttl_seconds)


def cache_delete(key: str):
    _cache.delete(key)


def cache_generation() -> int:
    return _cache.generation()


def cache_set_if_generation(key: str, value: Any, ttl_seconds: int, generation: int) -> bool:
    return _cache.set_if_generation(key, value, ttl_seconds, generation)


def invalidate_capabilities() -> int:
    """
    Forget every cached capability set.

    Team grants fan out to every member of the team, so invalidation is
    namespace-wide rather than per principal.
    """
    dropped = _cache.delete_prefix(CAPABILITY_PREFIX)
    logger.debug(f"Capability cache invalidated ({dropped} entries)")
    return dropped


def cache_clear():
    """Clear all cache entries."""
    _cache.clear()
