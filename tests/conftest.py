"""
Bible XML API - Test Configuration

Pytest fixtures shared by all tests.
"""
import pytest

from cache.tiers import TieredCache
from services.bible_service import BibleService
from tests.support import (
    OSIS_KJV,
    USFX_CORNILESCU,
    ZEFANIA_RVR,
    FakeBlobStore,
    FakeClock,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TieredCache:
    return TieredCache(size_limit=1000, clock=clock)


@pytest.fixture
def store() -> FakeBlobStore:
    """Store with one translation per supported document shape."""
    return FakeBlobStore({
        "bibles/kjv.xml": OSIS_KJV,
        "bibles/ro-cornilescu.xml": USFX_CORNILESCU,
        "bibles/rvr1909.xml": ZEFANIA_RVR,
        "bibles/README.md": b"# not a translation",
    })


@pytest.fixture
def service(store, cache) -> BibleService:
    return BibleService(store, cache=cache)
