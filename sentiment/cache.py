"""
Sentiment Cache - Bounded TTL memoization.

Entries carry an absolute expiry. Expired entries are evicted lazily on read
and in bulk by sweep(); when the cache is full the oldest insertion is dropped.
All timestamps are Unix seconds supplied by the caller's clock.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Generic, Hashable, Optional, TypeVar


logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """Cached value plus absolute expiry."""
    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


class TTLCache(Generic[K, V]):
    """
    In-process cache with per-entry TTL and a size bound.

    Usage:
        cache = TTLCache(ttl_seconds=6 * 3600, max_entries=10_000)
        cache.set(link, score, now=clock.timestamp())
        hit = cache.get(link, now=clock.timestamp())
    """

    def __init__(self, ttl_seconds: float, max_entries: Optional[int] = None) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: "OrderedDict[K, CacheEntry[V]]" = OrderedDict()
        self._stats = {"hits": 0, "misses": 0, "expired": 0, "evicted": 0}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: K, now: float) -> Optional[V]:
        """Return the live value for key, evicting it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None
        if entry.is_expired(now):
            del self._entries[key]
            self._stats["expired"] += 1
            self._stats["misses"] += 1
            return None
        self._stats["hits"] += 1
        return entry.value

    def set(self, key: K, value: V, now: float) -> None:
        """Store value under key, expiring ttl_seconds after now."""
        if key in self._entries:
            del self._entries[key]
        elif self.max_entries is not None:
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
                self._stats["evicted"] += 1
        self._entries[key] = CacheEntry(value=value, expires_at=now + self.ttl_seconds)

    def sweep(self, now: float) -> int:
        """Remove every expired entry; returns how many were removed."""
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            self._stats["expired"] += len(expired)
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def get_stats(self) -> dict[str, Any]:
        return {**self._stats, "size": len(self._entries)}
