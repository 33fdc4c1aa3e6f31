"""
Translation Catalog Resolver

Discovers translation documents in storage, extracts their metadata and
caches the result: the whole catalog under ``all_translations`` and every
translation under ``translation:<id>``.

A document's identifier is its lowercased filename stem, so
``translations/KJV.xml`` is served as ``kjv``.
"""
from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Sequence

from opentelemetry import trace

from cache.tiers import ALL_TRANSLATIONS_KEY, CacheTier, TieredCache, translation_key
from core.async_utils import gather_in_batches
from core.errors import BibleStorageError, BibleValidationError, MalformedDocumentError
from core.validation import validate_translation_id
from data.schemas import Translation
from observability.logging import get_logger
from parsing.metadata import extract_translation, extract_translation_or_default
from services.content import DocumentFetcher
from storage.base import BlobStore

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)


class TranslationCatalog:
    """
    Resolves translation identifiers to Translation records.

    Storage failures never escape: an unreachable backend yields an empty
    catalog and a bad document is skipped with a warning.
    """

    def __init__(
        self,
        store: BlobStore,
        fetcher: DocumentFetcher,
        cache: TieredCache,
        document_extensions: Sequence[str] = (".xml",),
        batch_size: int = 5,
        skip_malformed_documents: bool = True,
    ):
        self.store = store
        self.fetcher = fetcher
        self.cache = cache
        self.document_extensions = tuple(ext.lower() for ext in document_extensions)
        self.batch_size = batch_size
        self.skip_malformed_documents = skip_malformed_documents

    def is_document(self, key: str) -> bool:
        return key.lower().endswith(self.document_extensions)

    def identifier_from_key(self, key: str) -> str:
        """``"bibles/KJV.xml"`` -> ``"kjv"``."""
        filename = key.rsplit("/", 1)[-1]
        lowered = filename.lower()
        for extension in self.document_extensions:
            if lowered.endswith(extension):
                return lowered[: -len(extension)]
        return lowered

    async def list_translations(self) -> List[Translation]:
        """All translations in storage, in storage enumeration order."""
        cached = self.cache.get(ALL_TRANSLATIONS_KEY)
        if cached is not None:
            return list(cached)

        with tracer.start_as_current_span("catalog.refresh") as span:
            try:
                blobs = await self.store.list_blobs()
            except BibleStorageError as e:
                logger.error(
                    "Failed to list translation documents",
                    backend=self.store.backend,
                    error=e.message,
                )
                span.set_attribute("catalog.available", False)
                return []

            keys = [blob.name for blob in blobs if self.is_document(blob.name)]
            span.set_attribute("catalog.document_count", len(keys))

            outcome = await gather_in_batches(keys, self._load_translation, self.batch_size)
            for key, error in outcome.failed:
                logger.warning("Skipping translation document", document_key=key, error=str(error))

            translations = self._deduplicate(t for t in outcome.results if t is not None)
            span.set_attribute("catalog.translation_count", len(translations))

        if translations:
            self.cache.set(ALL_TRANSLATIONS_KEY, tuple(translations), CacheTier.CATALOG)
            for translation in translations:
                self.cache.set(translation_key(translation.identifier), translation, CacheTier.CATALOG)

        logger.info(
            "Translation catalog refreshed",
            documents=len(keys),
            translations=len(translations),
        )
        return translations

    async def get_translation_info(self, identifier: Optional[str]) -> Optional[Translation]:
        """Translation for ``identifier`` (case-insensitive), or None."""
        if identifier is None or not identifier.strip():
            return None

        normalized = identifier.strip().lower()
        cached = self.cache.get(translation_key(normalized))
        if cached is not None:
            return cached

        translations = await self.list_translations()
        return next((t for t in translations if t.identifier == normalized), None)

    async def resolve_translation(self, identifier: Optional[str] = None) -> Optional[Translation]:
        """Like ``get_translation_info`` but an empty identifier selects the first translation."""
        if identifier is not None and identifier.strip():
            return await self.get_translation_info(identifier)

        translations = await self.list_translations()
        return translations[0] if translations else None

    async def _load_translation(self, document_key: str) -> Optional[Translation]:
        identifier = self.identifier_from_key(document_key)
        try:
            validate_translation_id(identifier)
        except BibleValidationError as e:
            logger.warning(
                "Skipping document with unusable identifier",
                document_key=document_key,
                identifier=identifier,
                error=e.message,
            )
            return None

        content = await self.fetcher.fetch(document_key)
        if content is None:
            logger.warning("Skipping translation document without content", document_key=document_key)
            return None

        if not self.skip_malformed_documents:
            return await asyncio.to_thread(
                extract_translation_or_default, content, identifier, document_key
            )

        try:
            return await asyncio.to_thread(extract_translation, content, identifier, document_key)
        except MalformedDocumentError as e:
            logger.warning(
                "Skipping malformed translation document",
                document_key=document_key,
                error=e.message,
            )
            return None

    @staticmethod
    def _deduplicate(translations: Iterable[Translation]) -> List[Translation]:
        seen = {}
        for translation in translations:
            if translation.identifier in seen:
                logger.warning(
                    "Duplicate translation identifier",
                    identifier=translation.identifier,
                    kept=seen[translation.identifier].document_key,
                    ignored=translation.document_key,
                )
                continue
            seen[translation.identifier] = translation
        return list(seen.values())
