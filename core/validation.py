"""
Input Validation Utilities

Validators for translation identifiers, book tokens, chapters, verses and
verse ranges. Every validator either returns a normalized value or raises
``BibleValidationError`` naming the offending parameter.

Validation is purely functional: no I/O and no caching, only reads of the
book registry.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from core.errors import BibleValidationError
from data import books
from data.schemas import Reference


# Psalm 119 has 176 verses, the longest chapter in the canon
MAX_VERSE_NUMBER = 176

MIN_SEARCH_QUERY_LENGTH = 2
MAX_SEARCH_QUERY_LENGTH = 200
MAX_SEARCH_LIMIT = 500

MIN_TRANSLATION_ID_LENGTH = 2
MAX_TRANSLATION_ID_LENGTH = 20

TRANSLATION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

# "John 3:16-18", "1 Samuel 17", "jhn 3.16", "JHN.3.16-18"
REFERENCE_PATTERN = re.compile(
    r"^\s*(?P<book>.+?)[\s.]+(?P<chapter>\d+)"
    r"(?:\s*[:.]\s*(?P<start>\d+)(?:\s*-\s*(?P<end>\d+))?)?\s*$"
)


def validate_translation_id(
    translation_id: Optional[str],
    parameter_name: str = "translation_id",
) -> str:
    """
    Validate a translation identifier.

    Args:
        translation_id: Raw identifier, e.g. "kjv" or "ro-cornilescu"
        parameter_name: Name reported on failure

    Returns:
        The identifier in canonical (lowercase) form

    Raises:
        BibleValidationError: If the identifier is empty, has the wrong
            length or contains characters outside letters, digits, hyphen
            and underscore
    """
    if translation_id is None or not translation_id.strip():
        raise BibleValidationError(
            parameter_name, "Translation ID cannot be null or empty."
        )

    if not MIN_TRANSLATION_ID_LENGTH <= len(translation_id) <= MAX_TRANSLATION_ID_LENGTH:
        raise BibleValidationError(
            parameter_name,
            "Translation ID must be between 2 and 20 characters.",
            actual_value=translation_id,
        )

    if not TRANSLATION_ID_PATTERN.fullmatch(translation_id):
        raise BibleValidationError(
            parameter_name,
            "Translation ID can only contain letters, numbers, hyphens, and underscores.",
            actual_value=translation_id,
        )

    return translation_id.lower()


def validate_and_normalize_book_id(
    book_id: Optional[str],
    parameter_name: str = "book_id",
) -> str:
    """
    Validate a book token and return its canonical code.

    Raises:
        BibleValidationError: If the token is empty or not a known book
    """
    if book_id is None or not book_id.strip():
        raise BibleValidationError(parameter_name, "Book ID cannot be null or empty.")

    normalized = books.normalize(book_id)
    if not books.is_valid_book_id(normalized):
        raise BibleValidationError(
            parameter_name,
            f"'{book_id}' is not a valid Bible book identifier.",
            actual_value=book_id,
        )

    return normalized


def validate_chapter(
    book_id: str,
    chapter: int,
    parameter_name: str = "chapter",
) -> None:
    """
    Check a chapter number against the book's chapter count.

    Raises:
        BibleValidationError: If the chapter is below 1 or beyond the last
            chapter of the book; the message names the maximum
    """
    if chapter <= 0:
        raise BibleValidationError(
            parameter_name,
            "Chapter number must be greater than 0.",
            actual_value=chapter,
        )

    max_chapter = books.chapter_count(book_id)
    if chapter > max_chapter:
        raise BibleValidationError(
            parameter_name,
            f"Chapter {chapter} is not valid for {books.display_name(book_id)}. "
            f"Maximum chapter is {max_chapter}.",
            actual_value=chapter,
        )


def validate_verse(verse: int, parameter_name: str = "verse") -> None:
    """Check a verse number is within 1..176."""
    if verse <= 0:
        raise BibleValidationError(
            parameter_name,
            "Verse number must be greater than 0.",
            actual_value=verse,
        )

    if verse > MAX_VERSE_NUMBER:
        raise BibleValidationError(
            parameter_name,
            f"Verse number exceeds maximum expected verse count ({MAX_VERSE_NUMBER}).",
            actual_value=verse,
        )


def validate_verse_range(
    verse_start: Optional[int] = None,
    verse_end: Optional[int] = None,
) -> None:
    """
    Validate an optional verse range.

    Each bound present is checked with ``validate_verse``; when both are
    present the end must not precede the start.
    """
    if verse_start is not None:
        validate_verse(verse_start, "verse_start")

    if verse_end is not None:
        validate_verse(verse_end, "verse_end")

    if verse_start is not None and verse_end is not None and verse_end < verse_start:
        raise BibleValidationError(
            "verse_end",
            "End verse cannot be less than start verse.",
            actual_value=verse_end,
        )


def validate_and_normalize_book_ids(
    book_ids: Optional[Iterable[str]],
    parameter_name: str = "books",
) -> List[str]:
    """
    Validate a list of book tokens.

    Fails on the first invalid entry, reported as ``books[i]``.
    """
    entries = list(book_ids) if book_ids is not None else []
    if not entries:
        raise BibleValidationError(
            parameter_name, "At least one book must be specified."
        )

    return [
        validate_and_normalize_book_id(entry, f"{parameter_name}[{index}]")
        for index, entry in enumerate(entries)
    ]


def validate_reference(
    book_id: str,
    chapter: int,
    verse_start: Optional[int] = None,
    verse_end: Optional[int] = None,
) -> Reference:
    """Validate every component of a reference and build it."""
    normalized = validate_and_normalize_book_id(book_id)
    validate_chapter(normalized, chapter)
    validate_verse_range(verse_start, verse_end)
    return Reference(normalized, chapter, verse_start, verse_end)


def parse_reference(text: Optional[str]) -> Reference:
    """
    Parse a free-form reference string.

    Args:
        text: Reference like "John 3:16", "1 Samuel 17", "jhn 3:16-18"
            or "JHN.3.16"

    Returns:
        Validated Reference

    Raises:
        BibleValidationError: If the string cannot be read as a reference
            or any component fails validation
    """
    if text is None or not text.strip():
        raise BibleValidationError("reference", "Reference cannot be null or empty.")

    match = REFERENCE_PATTERN.match(text)
    if not match:
        raise BibleValidationError(
            "reference",
            f"'{text}' is not a valid Bible reference. Expected e.g. 'John 3:16-18'.",
            actual_value=text,
        )

    start = match.group("start")
    end = match.group("end")
    return validate_reference(
        match.group("book"),
        int(match.group("chapter")),
        int(start) if start else None,
        int(end) if end else None,
    )


def validate_search_query(query: Optional[str], parameter_name: str = "query") -> str:
    """Return the stripped query; it must hold 2..200 characters."""
    if query is None or not query.strip():
        raise BibleValidationError(parameter_name, "Search query cannot be null or empty.")

    stripped = query.strip()
    if not MIN_SEARCH_QUERY_LENGTH <= len(stripped) <= MAX_SEARCH_QUERY_LENGTH:
        raise BibleValidationError(
            parameter_name,
            f"Search query must be between {MIN_SEARCH_QUERY_LENGTH} and "
            f"{MAX_SEARCH_QUERY_LENGTH} characters.",
            actual_value=query,
        )
    return stripped


def validate_limit(limit: int, parameter_name: str = "limit") -> None:
    if not 1 <= limit <= MAX_SEARCH_LIMIT:
        raise BibleValidationError(
            parameter_name,
            f"Limit must be between 1 and {MAX_SEARCH_LIMIT}.",
            actual_value=limit,
        )
