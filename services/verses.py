"""
Verse/Chapter Resolver

Answers chapter, verse-range, random-verse and search queries for one
translation. Verse text comes from the parsed document; verses the document
does not carry get deterministic stand-in text so the requested window is
always answered in full.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence

from opentelemetry import trace

from core.validation import validate_limit, validate_search_query
from data import books
from data.schemas import Book, BookChapter, Translation, Verse
from observability.logging import LogContext, get_logger
from parsing.scripture import ScriptureIndex
from services.catalog import TranslationCatalog
from services.content import DocumentFetcher

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_WINDOW_SIZE = 10
DEFAULT_MAX_VERSE = 31
DEFAULT_SEARCH_LIMIT = 50


def placeholder_text(book_name: str, chapter: int, verse: int, translation: Translation) -> str:
    return f"Sample verse text for {book_name} {chapter}:{verse} from {translation.name}"


def random_placeholder_text(book_name: str, chapter: int, verse: int, translation: Translation) -> str:
    return f"Random verse text for {book_name} {chapter}:{verse} from {translation.name}"


class VerseResolver:
    """
    Usage:
        resolver = VerseResolver(catalog, fetcher, base_url="https://api.example.org/v1/data")
        chapters = await resolver.get_chapters_for_book("kjv", "JHN")
        verses = await resolver.get_verses_by_reference("kjv", "JHN", 3, 16, 18)
    """

    def __init__(
        self,
        catalog: TranslationCatalog,
        fetcher: DocumentFetcher,
        rng: Optional[random.Random] = None,
        base_url: str = "",
        window_size: int = DEFAULT_WINDOW_SIZE,
        max_verse: int = DEFAULT_MAX_VERSE,
    ):
        self.catalog = catalog
        self.fetcher = fetcher
        self.rng = rng or random.Random()
        self.base_url = base_url.rstrip("/")
        self.window_size = window_size
        self.max_verse = max_verse

    async def _load_index(self, translation: Translation) -> Optional[ScriptureIndex]:
        if not translation.document_key:
            return None
        async with LogContext(translation_id=translation.identifier):
            return await self.fetcher.fetch_index(translation.document_key)

    def chapter_url(self, translation_id: str, book_id: str, chapter: int) -> Optional[str]:
        if not self.base_url:
            return None
        return f"{self.base_url}/{translation_id}/{book_id}/{chapter}"

    async def get_books(self, translation_id: str) -> List[Book]:
        """
        Books of a translation in canonical order.

        Documents whose parsed content names no books are assumed to carry
        the full canon.
        """
        translation = await self.catalog.get_translation_info(translation_id)
        if translation is None:
            return []

        index = await self._load_index(translation)
        codes = index.books() if index is not None and index.books() else books.ALL_PROTESTANT_BOOKS
        return [
            Book(info.id, info.name, info.chapters, info.testament)
            for info in (books.BOOKS[code] for code in codes)
        ]

    async def get_chapters_for_book(self, translation_id: str, book_id: str) -> List[BookChapter]:
        translation = await self.catalog.get_translation_info(translation_id)
        if translation is None:
            return []

        code = books.normalize(book_id)
        if not code:
            return []

        name = books.display_name(code)
        return [
            BookChapter(code, name, chapter, self.chapter_url(translation.identifier, code, chapter))
            for chapter in range(1, books.chapter_count(code) + 1)
        ]

    async def get_verses_by_reference(
        self,
        translation_id: str,
        book_id: str,
        chapter: int,
        verse_start: Optional[int] = None,
        verse_end: Optional[int] = None,
    ) -> List[Verse]:
        """
        One Verse per number in the inclusive window, ascending.

        ``verse_start`` defaults to 1 and ``verse_end`` to
        ``min(verse_start + window_size, max_verse)``. An unknown book, a
        chapter outside the book or an empty window gives ``[]``.
        """
        translation = await self.catalog.get_translation_info(translation_id)
        if translation is None:
            return []

        code = books.normalize(book_id)
        if not code or chapter < 1 or chapter > books.chapter_count(code):
            return []

        start = 1 if verse_start is None else verse_start
        end = min(start + self.window_size, self.max_verse) if verse_end is None else verse_end
        if start < 1 or end < start:
            return []

        with tracer.start_as_current_span("verses.resolve") as span:
            span.set_attribute("translation.id", translation.identifier)
            span.set_attribute("verse.book", code)
            span.set_attribute("verse.chapter", chapter)
            span.set_attribute("verse.window", end - start + 1)

            index = await self._load_index(translation)
            name = books.display_name(code)
            verses = []
            for number in range(start, end + 1):
                text = index.verse_text(code, chapter, number) if index is not None else None
                if text is None:
                    text = placeholder_text(name, chapter, number, translation)
                verses.append(Verse(code, name, chapter, number, text))
            return verses

    async def get_random_verse(
        self,
        translation_id: str,
        book_ids: Sequence[str],
    ) -> Optional[Verse]:
        """
        A verse from a uniformly chosen book, chapter in ``[1, chapter_count]``
        and verse in ``[1, max_verse]``. Unrecognized book tokens are dropped.
        """
        codes = [code for code in (books.normalize(b) for b in book_ids or ()) if code]
        if not codes:
            return None

        translation = await self.catalog.get_translation_info(translation_id)
        if translation is None:
            return None

        code = self.rng.choice(codes)
        chapter = self.rng.randint(1, books.chapter_count(code))
        number = self.rng.randint(1, self.max_verse)
        name = books.display_name(code)

        index = await self._load_index(translation)
        text = index.verse_text(code, chapter, number) if index is not None else None
        if text is None:
            text = random_placeholder_text(name, chapter, number, translation)
        return Verse(code, name, chapter, number, text)

    async def search_verses(
        self,
        translation_id: str,
        query: str,
        book_ids: Optional[Sequence[str]] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> List[Verse]:
        """
        Case-insensitive substring search over the parsed document.

        Raises:
            BibleValidationError: On an empty or oversized query, or a limit
                outside 1..500
        """
        needle = validate_search_query(query)
        validate_limit(limit)

        translation = await self.catalog.get_translation_info(translation_id)
        if translation is None:
            return []

        index = await self._load_index(translation)
        if index is None:
            logger.warning(
                "Search unavailable for translation without parsed content",
                translation_id=translation.identifier,
            )
            return []

        allowed = None
        if book_ids:
            allowed = [code for code in (books.normalize(b) for b in book_ids) if code]

        with tracer.start_as_current_span("verses.search") as span:
            span.set_attribute("translation.id", translation.identifier)
            rows = index.search(needle, allowed, limit)
            span.set_attribute("search.result_count", len(rows))

        return [
            Verse(code, books.display_name(code), chapter, number, text)
            for code, chapter, number, text in rows
        ]
