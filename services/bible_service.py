"""
Bible Service

Single entry point for the request layer and the CLI. Wires storage, the
two-tier cache, the catalog and the verse resolver from configuration.

Usage:
    from config import get_config
    from services import BibleService

    service = BibleService.from_config(get_config())
    translations = await service.list_translations()
    verses = await service.get_verses("John 3:16-18", "kjv")
"""
from __future__ import annotations

import datetime as dt
import random
from typing import Any, Dict, List, Optional, Sequence

from cache.tiers import TieredCache
from core.validation import parse_reference
from data import books
from data.schemas import Book, BookChapter, Translation, Verse
from observability.logging import get_logger
from services.catalog import TranslationCatalog
from services.content import DocumentFetcher
from services.daily import select_daily_reference
from services.health import HealthReport, check_storage_health
from services.verses import DEFAULT_SEARCH_LIMIT, VerseResolver
from storage import create_blob_store
from storage.base import BlobStore

logger = get_logger(__name__)


class BibleService:
    """Facade over the catalog and verse resolvers."""

    def __init__(
        self,
        store: BlobStore,
        cache: Optional[TieredCache] = None,
        document_extensions: Sequence[str] = (".xml",),
        batch_size: int = 5,
        skip_malformed_documents: bool = True,
        base_url: str = "",
        rng: Optional[random.Random] = None,
        window_size: Optional[int] = None,
        max_verse: Optional[int] = None,
    ):
        self.store = store
        self.cache = cache or TieredCache()
        self.fetcher = DocumentFetcher(store, self.cache)
        self.catalog = TranslationCatalog(
            store,
            self.fetcher,
            self.cache,
            document_extensions=document_extensions,
            batch_size=batch_size,
            skip_malformed_documents=skip_malformed_documents,
        )
        resolver_options: Dict[str, Any] = {}
        if window_size is not None:
            resolver_options["window_size"] = window_size
        if max_verse is not None:
            resolver_options["max_verse"] = max_verse
        self.verses = VerseResolver(
            self.catalog, self.fetcher, rng=rng, base_url=base_url, **resolver_options
        )

    @classmethod
    def from_config(cls, config: Any, store: Optional[BlobStore] = None) -> "BibleService":
        """
        Build from a validated ``config.Config``.

        Raises:
            BibleConfigError: If the configuration is unusable
        """
        config.validate()
        store = store or create_blob_store(config.storage)
        logger.info(
            "Bible service configured",
            backend=store.backend,
            location=store.describe(),
            cache_size_limit=config.cache.size_limit,
        )
        return cls(
            store,
            cache=TieredCache.from_config(config.cache),
            document_extensions=config.storage.document_extensions,
            batch_size=config.catalog.fetch_batch_size,
            skip_malformed_documents=config.catalog.skip_malformed_documents,
            base_url=config.api.base_url,
            window_size=config.catalog.default_window_size,
            max_verse=config.catalog.default_max_verse,
        )

    # Catalog

    async def list_translations(self) -> List[Translation]:
        return await self.catalog.list_translations()

    async def get_translation_info(self, identifier: Optional[str]) -> Optional[Translation]:
        return await self.catalog.get_translation_info(identifier)

    async def resolve_translation(self, identifier: Optional[str] = None) -> Optional[Translation]:
        return await self.catalog.resolve_translation(identifier)

    # Verses

    async def get_books(self, translation_id: str) -> List[Book]:
        return await self.verses.get_books(translation_id)

    async def get_chapters_for_book(self, translation_id: str, book_id: str) -> List[BookChapter]:
        return await self.verses.get_chapters_for_book(translation_id, book_id)

    async def get_verses_by_reference(
        self,
        translation_id: str,
        book_id: str,
        chapter: int,
        verse_start: Optional[int] = None,
        verse_end: Optional[int] = None,
    ) -> List[Verse]:
        return await self.verses.get_verses_by_reference(
            translation_id, book_id, chapter, verse_start, verse_end
        )

    async def get_verses(self, reference: str, translation_id: str) -> List[Verse]:
        """
        Resolve a free-form reference such as "John 3:16-18".

        Raises:
            BibleValidationError: If the reference cannot be parsed
        """
        parsed = parse_reference(reference)
        return await self.verses.get_verses_by_reference(
            translation_id, parsed.book_id, parsed.chapter, parsed.verse_start, parsed.verse_end
        )

    async def get_random_verse(self, translation_id: str, book_ids: Sequence[str]) -> Optional[Verse]:
        return await self.verses.get_random_verse(translation_id, book_ids)

    async def get_daily_verse(
        self,
        translation_id: str,
        day: Optional[dt.date] = None,
    ) -> Optional[Verse]:
        """Verse of the day, or a random verse when the reading list entry resolves to nothing."""
        reference = select_daily_reference(day)
        verses = await self.verses.get_verses_by_reference(
            translation_id,
            reference.book_id,
            reference.chapter,
            reference.verse_start,
            reference.verse_end,
        )
        if verses:
            return verses[0]
        return await self.verses.get_random_verse(translation_id, books.ALL_PROTESTANT_BOOKS)

    async def search_verses(
        self,
        translation_id: str,
        query: str,
        book_ids: Optional[Sequence[str]] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> List[Verse]:
        return await self.verses.search_verses(translation_id, query, book_ids, limit)

    # Operations

    async def check_health(self, sample_size: int = 5) -> HealthReport:
        return await check_storage_health(self.store, sample_size=sample_size)

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats_dict()
