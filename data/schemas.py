"""
Data Schemas

Immutable records produced by the catalog and verse resolvers. Each record
serializes to the JSON shape served by the request layer via ``to_dict``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from data.books import Testament, display_name


@dataclass(frozen=True)
class Translation:
    """
    A Bible translation backed by one source document.

    Example:
    {
        "identifier": "kjv",
        "name": "King James Version",
        "language": "english",
        "language_code": "en",
        "license": "Public Domain"
    }
    """
    identifier: str
    name: str
    language: str = "english"
    language_code: str = "en"
    license: str = "Public Domain"
    document_key: Optional[str] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "language": self.language,
            "language_code": self.language_code,
            "license": self.license,
        }


@dataclass(frozen=True)
class Book:
    """A canonical book as listed for a translation."""
    book_id: str
    name: str
    chapters: int
    testament: Testament

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["testament"] = self.testament.value
        return data


@dataclass(frozen=True)
class BookChapter:
    """One chapter of a book, optionally with a navigational URL."""
    book_id: str
    book: str
    chapter: int
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Verse:
    """A single verse of a translation."""
    book_id: str
    book: str
    chapter: int
    verse_number: int
    text: str

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse_number}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Reference:
    """
    A validated (book, chapter, verse range) triple.

    Construct through ``core.validation`` so the invariants hold:
    chapter within the book's chapter count, verses in 1..176 and
    ``verse_start <= verse_end`` when both are present.
    """
    book_id: str
    chapter: int
    verse_start: Optional[int] = None
    verse_end: Optional[int] = None

    @property
    def book_name(self) -> str:
        return display_name(self.book_id)

    @property
    def label(self) -> str:
        """Human readable form, e.g. "John 3:16-18"."""
        text = f"{self.book_name} {self.chapter}"
        if self.verse_start is None:
            return text
        text = f"{text}:{self.verse_start}"
        if self.verse_end is not None and self.verse_end != self.verse_start:
            text = f"{text}-{self.verse_end}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["reference"] = self.label
        return data
