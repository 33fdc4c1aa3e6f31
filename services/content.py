"""
Document content fetcher.

Reads translation documents through the content cache tier. Missing blobs
and storage failures are logged and reported as ``None``; they never raise
out of this layer.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from opentelemetry import trace

from cache.tiers import CacheTier, TieredCache, content_key, index_key
from core.errors import BibleStorageError, BlobNotFoundError, MalformedDocumentError
from observability.logging import get_logger
from parsing.scripture import ScriptureIndex, parse_scripture
from storage.base import BlobStore

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)


class DocumentFetcher:
    """
    Usage:
        fetcher = DocumentFetcher(store, cache)
        xml = await fetcher.fetch("kjv.xml")
        index = await fetcher.fetch_index("kjv.xml")
    """

    def __init__(self, store: BlobStore, cache: TieredCache):
        self.store = store
        self.cache = cache

    async def fetch(self, document_key: str) -> Optional[bytes]:
        """Raw document bytes, or None when the blob is missing or unreadable."""
        key = content_key(document_key)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        with tracer.start_as_current_span("document.fetch") as span:
            span.set_attribute("document.key", document_key)
            try:
                content = await self.store.fetch(document_key)
            except BlobNotFoundError:
                logger.info("Document not found", document_key=document_key)
                return None
            except BibleStorageError as e:
                logger.error(
                    "Failed to fetch document",
                    document_key=document_key,
                    backend=self.store.backend,
                    error=e.message,
                )
                return None
            span.set_attribute("document.size", len(content))

        self.cache.set(key, content, CacheTier.CONTENT)
        return content

    async def fetch_index(self, document_key: str) -> Optional[ScriptureIndex]:
        """Parsed verse index of a document, or None when it cannot be read."""
        key = index_key(document_key)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        content = await self.fetch(document_key)
        if content is None:
            return None

        with tracer.start_as_current_span("document.parse") as span:
            span.set_attribute("document.key", document_key)
            try:
                index = await asyncio.to_thread(parse_scripture, content, document_key)
            except MalformedDocumentError as e:
                logger.warning(
                    "Document could not be parsed",
                    document_key=document_key,
                    error=e.message,
                    line=e.line,
                )
                return None
            span.set_attribute("document.verse_count", len(index))

        self.cache.set(key, index, CacheTier.CONTENT)
        return index
