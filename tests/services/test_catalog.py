"""
Tests for services/catalog.py - Translation Catalog Resolver.

Covers:
- Discovery of documents by extension and identifier derivation
- Metadata extraction per document shape
- Malformed documents skipped (or degraded when configured)
- Storage failures absorbed, never cached
- Catalog and per-translation caching
"""
import pytest

from cache.tiers import ALL_TRANSLATIONS_KEY, translation_key
from services.catalog import TranslationCatalog
from services.content import DocumentFetcher
from tests.support import MALFORMED, OSIS_KJV, FakeBlobStore


def make_catalog(store, cache, **kwargs):
    return TranslationCatalog(store, DocumentFetcher(store, cache), cache, **kwargs)


class TestIdentifiers:

    @pytest.mark.parametrize("key,expected", [
        ("kjv.xml", "kjv"),
        ("bibles/KJV.xml", "kjv"),
        ("a/b/ro-cornilescu.XML", "ro-cornilescu"),
    ])
    def test_identifier_from_key(self, store, cache, key, expected):
        assert make_catalog(store, cache).identifier_from_key(key) == expected

    def test_extensions(self, store, cache):
        catalog = make_catalog(store, cache, document_extensions=(".xml", ".osis"))
        assert catalog.is_document("bibles/kjv.OSIS")
        assert not catalog.is_document("bibles/README.md")


class TestListTranslations:

    @pytest.mark.asyncio
    async def test_lists_each_document(self, store, cache):
        translations = await make_catalog(store, cache).list_translations()

        assert [t.identifier for t in translations] == ["kjv", "ro-cornilescu", "rvr1909"]
        kjv, cornilescu, rvr = translations
        assert kjv.name == "King James Version"
        assert kjv.document_key == "bibles/kjv.xml"
        assert cornilescu.language == "romanian"
        assert rvr.language_code == "es"
        assert "bibles/README.md" not in store.fetch_calls

    @pytest.mark.asyncio
    async def test_malformed_document_skipped(self, cache):
        store = FakeBlobStore({"kjv.xml": OSIS_KJV, "broken.xml": MALFORMED})

        translations = await make_catalog(store, cache).list_translations()

        assert [t.identifier for t in translations] == ["kjv"]

    @pytest.mark.asyncio
    async def test_malformed_document_degrades_when_not_skipping(self, cache):
        store = FakeBlobStore({"kjv.xml": OSIS_KJV, "ro-broken.xml": MALFORMED})

        translations = await make_catalog(store, cache, skip_malformed_documents=False).list_translations()

        assert [t.identifier for t in translations] == ["kjv", "ro-broken"]
        assert translations[1].name == "RO-BROKEN"
        assert translations[1].language == "romanian"

    @pytest.mark.asyncio
    async def test_invalid_identifier_skipped(self, cache):
        store = FakeBlobStore({"kjv.xml": OSIS_KJV, "k.xml": OSIS_KJV, "king james.xml": OSIS_KJV})

        translations = await make_catalog(store, cache).list_translations()

        assert [t.identifier for t in translations] == ["kjv"]

    @pytest.mark.asyncio
    async def test_duplicate_identifier_keeps_first(self, cache):
        store = FakeBlobStore({"a/kjv.xml": OSIS_KJV, "b/KJV.xml": OSIS_KJV})

        translations = await make_catalog(store, cache).list_translations()

        assert len(translations) == 1
        assert translations[0].document_key == "a/kjv.xml"

    @pytest.mark.asyncio
    async def test_storage_failure_returns_empty_and_is_not_cached(self, store, cache):
        catalog = make_catalog(store, cache)
        store.available = False

        assert await catalog.list_translations() == []
        assert cache.get(ALL_TRANSLATIONS_KEY) is None

        store.available = True
        assert len(await catalog.list_translations()) == 3

    @pytest.mark.asyncio
    async def test_empty_store_not_cached(self, cache):
        store = FakeBlobStore()
        catalog = make_catalog(store, cache)

        assert await catalog.list_translations() == []
        assert await catalog.list_translations() == []
        assert store.list_calls == 2

    @pytest.mark.asyncio
    async def test_catalog_cached(self, store, cache):
        catalog = make_catalog(store, cache)

        first = await catalog.list_translations()
        second = await catalog.list_translations()

        assert first == second
        assert store.list_calls == 1
        assert cache.get(translation_key("kjv")).name == "King James Version"

    @pytest.mark.asyncio
    async def test_catalog_refreshed_after_expiry(self, store, cache, clock):
        catalog = make_catalog(store, cache)
        await catalog.list_translations()

        clock.advance(8 * 24 * 3600)
        await catalog.list_translations()

        assert store.list_calls == 2

    @pytest.mark.asyncio
    async def test_documents_fetched_in_batches(self, cache):
        store = FakeBlobStore({f"t{i:02d}.xml": OSIS_KJV for i in range(12)})

        translations = await make_catalog(store, cache, batch_size=5).list_translations()

        assert len(translations) == 12
        assert len(store.fetch_calls) == 12


class TestGetTranslationInfo:

    @pytest.mark.asyncio
    async def test_case_insensitive(self, store, cache):
        catalog = make_catalog(store, cache)

        translation = await catalog.get_translation_info("KJV")

        assert translation.identifier == "kjv"

    @pytest.mark.asyncio
    async def test_second_lookup_does_not_list_again(self, store, cache):
        catalog = make_catalog(store, cache)

        await catalog.get_translation_info("kjv")
        await catalog.get_translation_info("kjv")
        await catalog.get_translation_info("rvr1909")

        assert store.list_calls == 1

    @pytest.mark.asyncio
    async def test_per_translation_entry_used_first(self, store, cache):
        catalog = make_catalog(store, cache)
        await catalog.list_translations()
        store.available = False

        assert (await catalog.get_translation_info("kjv")).identifier == "kjv"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identifier", [None, "", "  ", "nope"])
    async def test_unknown(self, store, cache, identifier):
        assert await make_catalog(store, cache).get_translation_info(identifier) is None

    @pytest.mark.asyncio
    async def test_resolve_translation_default(self, store, cache):
        catalog = make_catalog(store, cache)

        assert (await catalog.resolve_translation()).identifier == "kjv"
        assert (await catalog.resolve_translation("RVR1909")).identifier == "rvr1909"
        assert await catalog.resolve_translation("nope") is None

    @pytest.mark.asyncio
    async def test_resolve_translation_empty_catalog(self, cache):
        assert await make_catalog(FakeBlobStore(), cache).resolve_translation() is None

    @pytest.mark.asyncio
    async def test_entries_use_catalog_tier(self, store, cache, clock):
        catalog = make_catalog(store, cache)
        await catalog.list_translations()

        clock.advance(3 * 3600)

        assert cache.get(translation_key("kjv")) is not None
        assert cache.get("content:bibles/kjv.xml") is None
