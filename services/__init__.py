"""
Translation resolution services: catalog, verse resolver, daily verse,
health check and the BibleService facade.
"""
from services.bible_service import BibleService
from services.catalog import TranslationCatalog
from services.content import DocumentFetcher
from services.daily import DAILY_VERSES, select_daily_reference
from services.health import HealthReport, HealthStatus, check_storage_health
from services.verses import VerseResolver

__all__ = [
    "BibleService",
    "DAILY_VERSES",
    "DocumentFetcher",
    "HealthReport",
    "HealthStatus",
    "TranslationCatalog",
    "VerseResolver",
    "check_storage_health",
    "select_daily_reference",
]
