"""
Core Module

Foundational pieces shared by every layer:
- Error hierarchy with structured context and span recording
- Input validators for translation ids, books, chapters and verses
- Bounded-concurrency batch helpers

Usage:
    from core import BibleValidationError, parse_reference, gather_in_batches
"""

from core.async_utils import BatchOutcome, chunked, gather_in_batches
from core.errors import (
    BibleConfigError,
    BibleError,
    BibleStorageError,
    BibleValidationError,
    BlobNotFoundError,
    ErrorContext,
    ErrorSeverity,
    MalformedDocumentError,
    StorageUnavailableError,
)
from core.validation import (
    MAX_VERSE_NUMBER,
    parse_reference,
    validate_and_normalize_book_id,
    validate_and_normalize_book_ids,
    validate_chapter,
    validate_limit,
    validate_reference,
    validate_search_query,
    validate_translation_id,
    validate_verse,
    validate_verse_range,
)

__all__ = [
    # Errors
    "BibleError",
    "BibleConfigError",
    "BibleValidationError",
    "BibleStorageError",
    "StorageUnavailableError",
    "BlobNotFoundError",
    "MalformedDocumentError",
    "ErrorContext",
    "ErrorSeverity",
    # Validation
    "MAX_VERSE_NUMBER",
    "parse_reference",
    "validate_and_normalize_book_id",
    "validate_and_normalize_book_ids",
    "validate_chapter",
    "validate_limit",
    "validate_reference",
    "validate_search_query",
    "validate_translation_id",
    "validate_verse",
    "validate_verse_range",
    # Async utilities
    "BatchOutcome",
    "chunked",
    "gather_in_batches",
]
