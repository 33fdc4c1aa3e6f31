"""
Cache Layer

Generic weight-bounded expiring cache and the catalog/content tier policies
layered on top of it.
"""
from cache.memory import (
    CacheEntry,
    CachePriority,
    CacheStats,
    EntryPolicy,
    ExpiringCache,
)
from cache.tiers import (
    ALL_TRANSLATIONS_KEY,
    CacheTier,
    TierPolicies,
    TieredCache,
    content_key,
    index_key,
    translation_key,
)

__all__ = [
    "CacheEntry",
    "CachePriority",
    "CacheStats",
    "EntryPolicy",
    "ExpiringCache",
    "ALL_TRANSLATIONS_KEY",
    "CacheTier",
    "TierPolicies",
    "TieredCache",
    "content_key",
    "index_key",
    "translation_key",
]
