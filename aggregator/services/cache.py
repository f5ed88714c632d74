"""
CacheManager - In-memory response cache with per-entry TTL.

Features:
- Keyed storage of endpoint results
- TTL (Time To Live) per entry, checked on every read
- Thread-safe: the critical sections never await, so the same instance
  can be shared by coroutines and worker threads alike
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Generic, TypeVar

from loguru import logger

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cache entry with metadata."""

    data: T
    timestamp: datetime
    ttl: timedelta

    @property
    def expires_at(self) -> datetime:
        return self.timestamp + self.ttl

    def is_expired(self, now: datetime) -> bool:
        """Check if entry is past its TTL."""
        return now >= self.expires_at


class CacheManager:
    """
    Thread-safe TTL cache for endpoint results.

    Expired entries are dropped lazily when they are read, or in bulk via
    cleanup_expired(). There is no size bound: the key space is the small
    set of endpoint/filter/sort combinations.

    Usage:
        cache = CacheManager(default_ttl=timedelta(minutes=15))

        cached = await cache.get("NewsCacheKey_ai_Date_Asc")
        if cached is not None:
            return cached

        result = await call_endpoint()
        await cache.set("NewsCacheKey_ai_Date_Asc", result)
    """

    def __init__(
        self,
        default_ttl: timedelta = timedelta(minutes=15),
        debug: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._memory: dict[str, CacheEntry[Any]] = {}
        self._default_ttl = default_ttl
        self._debug = debug
        self._clock = clock
        self._lock = threading.Lock()
        self._stats = CacheStats()

    @property
    def default_ttl(self) -> timedelta:
        return self._default_ttl

    async def get(self, key: str) -> Any | None:
        """
        Get value from cache.

        Returns the cached value if present and not expired, None otherwise.
        """
        with self._lock:
            entry = self._memory.get(key)
            if entry is None:
                self._stats.misses += 1
                self._log(f"MISS: {key[:50]}")
                return None

            if entry.is_expired(self._clock()):
                del self._memory[key]
                self._stats.misses += 1
                self._stats.expirations += 1
                self._log(f"EXPIRED: {key[:50]}")
                return None

            self._stats.hits += 1
            self._log(f"HIT: {key[:50]}")
            return entry.data

    async def set(self, key: str, data: Any, ttl: timedelta | None = None) -> None:
        """
        Set value in cache.

        Args:
            key: Cache key
            data: Data to cache
            ttl: Time to live (uses default if not specified)
        """
        if ttl is None:
            ttl = self._default_ttl
        entry = CacheEntry(data=data, timestamp=self._clock(), ttl=ttl)

        with self._lock:
            self._memory[key] = entry
            self._log(f"SET: {key[:50]} (TTL: {ttl.total_seconds()}s)")

    async def delete(self, key: str) -> bool:
        """Delete a specific key from cache."""
        with self._lock:
            if key in self._memory:
                del self._memory[key]
                self._log(f"DELETE: {key[:50]}")
                return True
            return False

    async def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            count = len(self._memory)
            self._memory.clear()
            self._log(f"CLEAR: {count} entries removed")

    async def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count of removed entries."""
        now = self._clock()
        with self._lock:
            expired_keys = [k for k, v in self._memory.items() if v.is_expired(now)]
            for key in expired_keys:
                del self._memory[key]
            self._stats.expirations += len(expired_keys)

            if expired_keys:
                self._log(f"CLEANUP: {len(expired_keys)} expired entries removed")

            return len(expired_keys)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._memory.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def get_stats(self) -> "CacheStats":
        """Get cache statistics."""
        with self._lock:
            self._stats.size = len(self._memory)
        return self._stats

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[CacheManager] {message}")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expirations": self.expirations,
            "size": self.size,
            "hit_rate": f"{self.hit_rate:.2%}",
        }
