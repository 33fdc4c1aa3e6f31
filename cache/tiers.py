"""
Two-tier cache policy.

The catalog tier holds translation metadata (long lived, cheap, high
priority); the content tier holds document text and parsed verse indexes
(shorter lived, heavier, normal priority). Both tiers share one weight
budget in a single ``ExpiringCache``; eviction is delegated to it.

There is no invalidation call; staleness is bounded by TTL.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from cache.memory import CachePriority, CacheStats, Clock, EntryPolicy, ExpiringCache

ALL_TRANSLATIONS_KEY = "all_translations"

_HOUR = 3600.0
_DAY = 24 * _HOUR


class CacheTier(str, Enum):
    CATALOG = "catalog"
    CONTENT = "content"


def translation_key(identifier: str) -> str:
    return f"translation:{identifier.lower()}"


def content_key(document_key: str) -> str:
    return f"content:{document_key}"


def index_key(document_key: str) -> str:
    return f"index:{document_key}"


@dataclass(frozen=True)
class TierPolicies:
    """Entry policy per tier."""

    catalog: EntryPolicy = EntryPolicy(
        sliding_seconds=24 * _HOUR,
        absolute_seconds=7 * _DAY,
        weight=1,
        priority=CachePriority.HIGH,
    )
    content: EntryPolicy = EntryPolicy(
        sliding_seconds=2 * _HOUR,
        absolute_seconds=_DAY,
        weight=10,
        priority=CachePriority.NORMAL,
    )

    def for_tier(self, tier: CacheTier) -> EntryPolicy:
        return self.catalog if tier == CacheTier.CATALOG else self.content

    @classmethod
    def from_config(cls, config: Any) -> "TierPolicies":
        """Build from a ``config.CacheConfig``."""
        return cls(
            catalog=EntryPolicy(
                sliding_seconds=config.catalog_sliding_seconds,
                absolute_seconds=config.catalog_absolute_seconds,
                weight=config.catalog_weight,
                priority=CachePriority.HIGH,
            ),
            content=EntryPolicy(
                sliding_seconds=config.content_sliding_seconds,
                absolute_seconds=config.content_absolute_seconds,
                weight=config.content_weight,
                priority=CachePriority.NORMAL,
            ),
        )


class TieredCache:
    """
    Cache facade used by the resolvers.

    Usage:
        cache = TieredCache(size_limit=1000)
        cache.set(ALL_TRANSLATIONS_KEY, translations, CacheTier.CATALOG)
        translations = cache.get(ALL_TRANSLATIONS_KEY)
    """

    def __init__(
        self,
        size_limit: int = 1000,
        policies: Optional[TierPolicies] = None,
        clock: Optional[Clock] = None,
    ):
        self.policies = policies or TierPolicies()
        if clock is None:
            self._store: ExpiringCache[Any] = ExpiringCache(size_limit=size_limit)
        else:
            self._store = ExpiringCache(size_limit=size_limit, clock=clock)

    @classmethod
    def from_config(cls, config: Any, clock: Optional[Clock] = None) -> "TieredCache":
        return cls(
            size_limit=config.size_limit,
            policies=TierPolicies.from_config(config),
            clock=clock,
        )

    def get(self, key: str) -> Optional[Any]:
        return self._store.get(key)

    def set(self, key: str, value: Any, tier: CacheTier) -> None:
        self._store.set(key, value, self.policies.for_tier(tier))

    def get_stats(self) -> CacheStats:
        return self._store.get_stats()

    def stats_dict(self) -> Dict[str, Any]:
        data = self.get_stats().to_dict()
        data["size_limit"] = self._store.size_limit
        return data
