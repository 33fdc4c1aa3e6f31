"""
Storage health check.

Reports whether the document store is reachable and holds translation
documents. Used by the CLI ``health`` command and by readiness checks of the
request layer.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from core.errors import BibleStorageError
from observability.logging import get_logger
from storage.base import BlobStore

logger = get_logger(__name__)


class HealthStatus(Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthReport:
    """Outcome of one storage health check."""
    status: HealthStatus
    backend: str
    location: str
    message: str
    sample_keys: List[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "backend": self.backend,
            "location": self.location,
            "message": self.message,
            "sample_keys": list(self.sample_keys),
            "duration_ms": round(self.duration_ms, 2),
        }


async def check_storage_health(store: BlobStore, sample_size: int = 5) -> HealthReport:
    """
    Ping the store and list up to ``sample_size`` keys.

    An unreachable store is UNHEALTHY; a reachable store with no keys is
    DEGRADED.
    """
    start_time = time.perf_counter()

    def report(status: HealthStatus, message: str, keys: List[str]) -> HealthReport:
        return HealthReport(
            status=status,
            backend=store.backend,
            location=store.describe(),
            message=message,
            sample_keys=keys,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    try:
        await store.ping()
        blobs = await store.list_blobs(limit=sample_size)
    except BibleStorageError as e:
        logger.error("Storage health check failed", backend=store.backend, error=e.message)
        return report(HealthStatus.UNHEALTHY, e.message, [])

    keys = [blob.name for blob in blobs]
    if not keys:
        return report(HealthStatus.DEGRADED, "Storage reachable but holds no documents", keys)
    return report(HealthStatus.HEALTHY, f"Storage reachable, sampled {len(keys)} document(s)", keys)
