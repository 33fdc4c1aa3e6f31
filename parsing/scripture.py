"""
Scripture Text Parsing

Builds a verse index (book -> chapter -> verse -> text) from a source
document. Supported markup:

- USFX: ``<book id="GEN">``, ``<c id="1"/>``, ``<v id="1"/>`` ... ``<ve/>``;
  chapters and verses may be milestones or containers
- OSIS: ``<div type="book" osisID="Gen">``, ``<verse osisID="Gen.1.1">``
  containers or ``sID``/``eID`` milestone pairs
- Zefania: ``<BIBLEBOOK bnumber="1">``, ``<CHAPTER cnumber="1">``,
  ``<VERS vnumber="1">``

Notes, footnotes, cross references and headings are not verse text and are
skipped. Verse text is whitespace-collapsed.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional, Tuple, Union

from data import books
from parsing.markup import collapse_whitespace, leading_int, local_name, parse_xml

# Elements whose content never belongs to a verse
SKIPPED_ELEMENTS = frozenset({
    # USFX
    "f", "fe", "x", "h", "toc", "s", "d", "rem", "ide", "id", "languageCode",
    # OSIS
    "note", "title", "header",
    # Zefania
    "NOTE", "CAPTION", "INFORMATION", "REMARK", "XREF",
})

VerseRow = Tuple[str, int, int, str]


class ScriptureIndex:
    """
    Parsed verse text of one document.

    Usage:
        index = parse_scripture(xml_bytes)
        index.chapters("JHN")             # [1, 2, ..., 21]
        index.verses("JHN", 3, 16, 18)    # [(16, "For God so loved..."), ...]
    """

    def __init__(self) -> None:
        self._books: Dict[str, Dict[int, Dict[int, str]]] = {}

    def add(self, book_id: str, chapter: int, verse: int, text: str) -> None:
        chapters = self._books.setdefault(book_id, {})
        verses = chapters.setdefault(chapter, {})
        existing = verses.get(verse)
        verses[verse] = f"{existing} {text}" if existing else text

    def books(self) -> List[str]:
        """Books present in the document, in canonical order."""
        return [code for code in books.ALL_PROTESTANT_BOOKS if code in self._books]

    def has_book(self, book_id: str) -> bool:
        return book_id in self._books

    def chapters(self, book_id: str) -> List[int]:
        return sorted(self._books.get(book_id, {}))

    def verses(
        self,
        book_id: str,
        chapter: int,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> List[Tuple[int, str]]:
        """Verses of a chapter within ``[start, end]``, ascending."""
        chapter_verses = self._books.get(book_id, {}).get(chapter, {})
        return [
            (number, chapter_verses[number])
            for number in sorted(chapter_verses)
            if (start is None or number >= start) and (end is None or number <= end)
        ]

    def verse_text(self, book_id: str, chapter: int, verse: int) -> Optional[str]:
        return self._books.get(book_id, {}).get(chapter, {}).get(verse)

    def search(
        self,
        query: str,
        book_ids: Optional[Iterable[str]] = None,
        limit: int = 50,
    ) -> List[VerseRow]:
        """Case-insensitive substring search in canonical order."""
        needle = query.casefold()
        allowed = set(book_ids) if book_ids is not None else None
        results: List[VerseRow] = []

        for book_id in self.books():
            if allowed is not None and book_id not in allowed:
                continue
            for chapter in self.chapters(book_id):
                for number, text in self.verses(book_id, chapter):
                    if needle in text.casefold():
                        results.append((book_id, chapter, number, text))
                        if len(results) >= limit:
                            return results
        return results

    def __len__(self) -> int:
        return sum(
            len(verses)
            for chapters in self._books.values()
            for verses in chapters.values()
        )


class _VerseCollector:
    """Walks a document tree tracking the current book, chapter and verse."""

    def __init__(self) -> None:
        self.index = ScriptureIndex()
        self.book = ""
        self.chapter: Optional[int] = None
        self.verse: Optional[int] = None
        self._buffer: List[str] = []

    def collect(self, root: ET.Element) -> ScriptureIndex:
        self._walk(root)
        self._close_verse()
        return self.index

    def _walk(self, element: ET.Element) -> None:
        tag = local_name(element.tag)
        if not tag or tag in SKIPPED_ELEMENTS:
            return

        container_verse = self._open(element, tag)
        if element.text:
            self._add_text(element.text)
        for child in element:
            self._walk(child)
            if child.tail:
                self._add_text(child.tail)
        if container_verse:
            self._close_verse()

    def _open(self, element: ET.Element, tag: str) -> bool:
        """
        Update position from a structural element.

        Returns True when the element is a verse container that must be
        closed once its children have been walked.
        """
        if tag == "book":
            self._set_book(books.normalize(element.get("id") or element.get("code")))
        elif tag == "div" and element.get("type") == "book":
            self._set_book(books.from_osis(element.get("osisID", "")))
        elif tag == "BIBLEBOOK":
            number = leading_int(element.get("bnumber"))
            in_canon = number is not None and 1 <= number <= len(books.ALL_PROTESTANT_BOOKS)
            self._set_book(books.ALL_PROTESTANT_BOOKS[number - 1] if in_canon else "")
        elif tag == "c":
            self._set_chapter(leading_int(element.get("id")))
        elif tag == "CHAPTER":
            self._set_chapter(leading_int(element.get("cnumber")))
        elif tag == "chapter":
            osis_id = element.get("osisID") or element.get("sID")
            if osis_id and not element.get("eID"):
                book_id, chapter, _ = _split_osis_id(osis_id)
                if book_id:
                    self.book = book_id
                self._set_chapter(chapter)
        elif tag == "v":
            self._start_verse(self.book, self.chapter, leading_int(element.get("id")))
            return _has_content(element)
        elif tag == "ve":
            self._close_verse()
        elif tag == "VERS":
            self._start_verse(self.book, self.chapter, leading_int(element.get("vnumber")))
            return True
        elif tag == "verse":
            if element.get("eID"):
                self._close_verse()
                return False
            osis_id = element.get("osisID") or element.get("sID")
            if osis_id:
                book_id, chapter, verse = _split_osis_id(osis_id)
                self._start_verse(book_id or self.book, chapter, verse)
            return not element.get("sID")
        return False

    def _set_book(self, book_id: str) -> None:
        self._close_verse()
        self.book = book_id
        self.chapter = None

    def _set_chapter(self, chapter: Optional[int]) -> None:
        self._close_verse()
        self.chapter = chapter

    def _start_verse(
        self,
        book_id: str,
        chapter: Optional[int],
        verse: Optional[int],
    ) -> None:
        self._close_verse()
        self.book = book_id
        self.chapter = chapter
        self.verse = verse

    def _add_text(self, text: str) -> None:
        if self.verse is not None:
            self._buffer.append(text)

    def _close_verse(self) -> None:
        if self.verse is not None and self.book and self.chapter:
            text = collapse_whitespace("".join(self._buffer))
            if text:
                self.index.add(self.book, self.chapter, self.verse, text)
        self.verse = None
        self._buffer = []


def _has_content(element: ET.Element) -> bool:
    return bool(element.text and element.text.strip()) or len(element) > 0


def _split_osis_id(osis_id: str) -> Tuple[str, Optional[int], Optional[int]]:
    """Split "Gen.1.1" (or "KJV:Gen.1.1 Gen.1.2") into its parts."""
    first = osis_id.split()[0]
    first = first.split(":", 1)[-1]
    parts = first.split(".")
    book_id = books.from_osis(parts[0])
    chapter = leading_int(parts[1]) if len(parts) > 1 else None
    verse = leading_int(parts[2]) if len(parts) > 2 else None
    return book_id, chapter, verse


def parse_scripture(
    content: Union[bytes, str],
    document_key: Optional[str] = None,
) -> ScriptureIndex:
    """
    Parse a document into a ScriptureIndex.

    Raises:
        MalformedDocumentError: If the document is empty or not well-formed
    """
    root = parse_xml(content, document_key)
    return _VerseCollector().collect(root)
