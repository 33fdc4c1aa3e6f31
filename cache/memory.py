"""
In-Memory Expiring Cache

Bounded, thread-safe cache with per-entry expiry policy:
- Sliding expiry, refreshed on every hit
- Absolute expiry, measured from insertion and never extended
- Size weight per entry, bounded by a total weight budget
- Priority-aware eviction once the budget is exceeded
- OpenTelemetry spans around lookups

Eviction order when an insert would exceed the budget: expired entries
first, then the lowest priority, least recently used entries. Entries at
``CachePriority.NEVER_REMOVE`` are only dropped once expired.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from enum import IntEnum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Optional,
    TypeVar,
)

from opentelemetry import trace

tracer = trace.get_tracer(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


class CachePriority(IntEnum):
    """Eviction priority; lower values are evicted first."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    NEVER_REMOVE = 3


@dataclass(frozen=True)
class EntryPolicy:
    """Expiry, weight and priority applied to an entry when it is stored."""

    sliding_seconds: Optional[float] = None
    absolute_seconds: Optional[float] = None
    weight: int = 1
    priority: CachePriority = CachePriority.NORMAL

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("Entry weight cannot be negative")


@dataclass
class CacheEntry(Generic[T]):
    """Cache entry with metadata for eviction decisions."""

    key: str
    value: T
    created_at: float
    last_accessed: float
    policy: EntryPolicy
    access_count: int = 0

    @property
    def weight(self) -> int:
        return self.policy.weight

    @property
    def priority(self) -> CachePriority:
        return self.policy.priority

    def is_expired(self, now: float) -> bool:
        sliding = self.policy.sliding_seconds
        if sliding is not None and now - self.last_accessed >= sliding:
            return True
        absolute = self.policy.absolute_seconds
        if absolute is not None and now - self.created_at >= absolute:
            return True
        return False


@dataclass
class CacheStats:
    """Statistics for cache monitoring."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    total_weight: int = 0
    entry_count: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "total_weight": self.total_weight,
            "entry_count": self.entry_count,
        }


class ExpiringCache(Generic[T]):
    """
    Weight-bounded cache with sliding and absolute expiry.

    Usage:
        cache = ExpiringCache[str](size_limit=1000)
        cache.set("content:kjv.xml", xml, EntryPolicy(sliding_seconds=7200, weight=10))
        xml = cache.get("content:kjv.xml")

    ``get`` returns ``None`` on a miss, so ``None`` itself cannot be cached.
    """

    def __init__(
        self,
        size_limit: int = 1000,
        clock: Clock = time.monotonic,
    ):
        if size_limit < 1:
            raise ValueError("Cache size limit must be at least 1")
        self.size_limit = size_limit
        self._clock = clock

        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def _remove(self, key: str) -> CacheEntry[T]:
        """Drop an entry and update accounting. Must be called with lock held."""
        entry = self._entries.pop(key)
        self._stats.total_weight -= entry.weight
        self._stats.entry_count = len(self._entries)
        return entry

    def _purge_expired(self, now: float) -> int:
        """Remove all expired entries. Must be called with lock held."""
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self._remove(key)
        self._stats.expirations += len(expired)
        return len(expired)

    def _evict_one(self) -> bool:
        """
        Evict the lowest priority, least recently used entry.

        Must be called with lock held. Iteration order of the OrderedDict is
        least recently used first, so the first entry found at the lowest
        priority is the victim.
        """
        victim: Optional[CacheEntry[T]] = None
        for entry in self._entries.values():
            if entry.priority == CachePriority.NEVER_REMOVE:
                continue
            if victim is None or entry.priority < victim.priority:
                victim = entry
        if victim is None:
            return False
        self._remove(victim.key)
        self._stats.evictions += 1
        return True

    def _compact(self, incoming_weight: int, now: float) -> None:
        """Make room for ``incoming_weight``. Must be called with lock held."""
        if self._stats.total_weight + incoming_weight <= self.size_limit:
            return
        self._purge_expired(now)
        while self._stats.total_weight + incoming_weight > self.size_limit:
            if not self._evict_one():
                break

    def get(self, key: str) -> Optional[T]:
        """
        Get a value from the cache.

        A hit refreshes the entry's sliding window and marks it most
        recently used. Expired entries are removed and reported as misses.
        """
        with tracer.start_as_current_span("cache.get") as span:
            span.set_attribute("cache.key", key)
            with self._lock:
                entry = self._entries.get(key)
                now = self._clock()

                if entry is None:
                    self._stats.misses += 1
                    span.set_attribute("cache.hit", False)
                    return None

                if entry.is_expired(now):
                    self._remove(key)
                    self._stats.expirations += 1
                    self._stats.misses += 1
                    span.set_attribute("cache.hit", False)
                    return None

                self._entries.move_to_end(key)
                entry.last_accessed = now
                entry.access_count += 1
                self._stats.hits += 1
                span.set_attribute("cache.hit", True)
                return entry.value

    def set(self, key: str, value: T, policy: Optional[EntryPolicy] = None) -> None:
        """
        Store a value, replacing any existing entry under the same key.

        An entry heavier than the whole budget is not stored.
        """
        policy = policy or EntryPolicy()
        if policy.weight > self.size_limit:
            return

        with self._lock:
            now = self._clock()
            if key in self._entries:
                self._remove(key)

            self._compact(policy.weight, now)

            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                created_at=now,
                last_accessed=now,
                policy=policy,
            )
            self._stats.total_weight += policy.weight
            self._stats.entry_count = len(self._entries)

    def contains(self, key: str) -> bool:
        """Check if key exists and is not expired, without touching it."""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
                total_weight=self._stats.total_weight,
                entry_count=self._stats.entry_count,
            )
