"""
Bible Book Registry

Static metadata for the 66 books of the Protestant canon: canonical codes,
display names, chapter counts, testament membership and the aliases accepted
from user input.

The table is built once at import time and never mutated. Lookups are pure
dictionary reads, so the registry is safe to share across threads and tasks.

Usage:
    from data.books import normalize, display_name, chapter_count

    normalize("1 Samuel")    # "1SA"
    normalize("jhn")         # "JHN"
    normalize("Nonsense")    # ""
    chapter_count("OBA")     # 1
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple


class Testament(str, Enum):
    """Testament designation."""
    OLD_TESTAMENT = "OT"
    NEW_TESTAMENT = "NT"


@dataclass(frozen=True)
class BookInfo:
    """One row of the registry."""
    id: str
    name: str
    chapters: int
    testament: Testament
    osis_id: str
    aliases: Tuple[str, ...] = ()

    @property
    def is_old_testament(self) -> bool:
        return self.testament == Testament.OLD_TESTAMENT


_OT = Testament.OLD_TESTAMENT
_NT = Testament.NEW_TESTAMENT

# (code, name, chapters, osis id, extra aliases) in canonical order
_BOOK_TABLE: Tuple[Tuple[str, str, int, str, Tuple[str, ...]], ...] = (
    # Old Testament
    ("GEN", "Genesis", 50, "Gen", ("gn", "ge")),
    ("EXO", "Exodus", 40, "Exod", ("ex", "exod")),
    ("LEV", "Leviticus", 27, "Lev", ("lv", "le")),
    ("NUM", "Numbers", 36, "Num", ("nm", "nu")),
    ("DEU", "Deuteronomy", 34, "Deut", ("dt", "deut")),
    ("JOS", "Joshua", 24, "Josh", ("josh",)),
    ("JDG", "Judges", 21, "Judg", ("jg",)),
    ("RUT", "Ruth", 4, "Ruth", ("ru", "rth")),
    ("1SA", "1 Samuel", 31, "1Sam", ("1 sa", "1 sm")),
    ("2SA", "2 Samuel", 24, "2Sam", ("2 sa", "2 sm")),
    ("1KI", "1 Kings", 22, "1Kgs", ("1 ki", "1 kgs", "1 kin")),
    ("2KI", "2 Kings", 25, "2Kgs", ("2 ki", "2 kgs", "2 kin")),
    ("1CH", "1 Chronicles", 29, "1Chr", ("1 ch", "1 chron")),
    ("2CH", "2 Chronicles", 36, "2Chr", ("2 ch", "2 chron")),
    ("EZR", "Ezra", 10, "Ezra", ()),
    ("NEH", "Nehemiah", 13, "Neh", ("ne",)),
    ("EST", "Esther", 10, "Esth", ("esth",)),
    ("JOB", "Job", 42, "Job", ("jb",)),
    ("PSA", "Psalms", 150, "Ps", ("psalm", "pss", "psm", "pslm")),
    ("PRO", "Proverbs", 31, "Prov", ("prv", "pr")),
    ("ECC", "Ecclesiastes", 12, "Eccl", ("eccles", "qoh", "qoheleth")),
    ("SNG", "Song of Solomon", 8, "Song", ("song of songs", "canticles", "sos", "sol")),
    ("ISA", "Isaiah", 66, "Isa", ("is",)),
    ("JER", "Jeremiah", 52, "Jer", ("je", "jr")),
    ("LAM", "Lamentations", 5, "Lam", ("la",)),
    ("EZK", "Ezekiel", 48, "Ezek", ("eze", "ezk")),
    ("DAN", "Daniel", 12, "Dan", ("dn", "da")),
    ("HOS", "Hosea", 14, "Hos", ("ho",)),
    ("JOL", "Joel", 3, "Joel", ("jl",)),
    ("AMO", "Amos", 9, "Amos", ("am",)),
    ("OBA", "Obadiah", 1, "Obad", ("ob",)),
    ("JON", "Jonah", 4, "Jonah", ("jnh",)),
    ("MIC", "Micah", 7, "Mic", ("mc",)),
    ("NAH", "Nahum", 3, "Nah", ("na", "nam")),
    ("HAB", "Habakkuk", 3, "Hab", ("hb",)),
    ("ZEP", "Zephaniah", 3, "Zeph", ("zp",)),
    ("HAG", "Haggai", 2, "Hag", ("hg",)),
    ("ZEC", "Zechariah", 14, "Zech", ("zc",)),
    ("MAL", "Malachi", 4, "Mal", ("ml",)),
    # New Testament
    ("MAT", "Matthew", 28, "Matt", ("mt",)),
    ("MRK", "Mark", 16, "Mark", ("mk", "mr")),
    ("LUK", "Luke", 24, "Luke", ("lk",)),
    ("JHN", "John", 21, "John", ("jn", "jhn")),
    ("ACT", "Acts", 28, "Acts", ("ac", "acts of the apostles")),
    ("ROM", "Romans", 16, "Rom", ("ro", "rm")),
    ("1CO", "1 Corinthians", 16, "1Cor", ("1 co", "1 cor")),
    ("2CO", "2 Corinthians", 13, "2Cor", ("2 co", "2 cor")),
    ("GAL", "Galatians", 6, "Gal", ("ga",)),
    ("EPH", "Ephesians", 6, "Eph", ("ephes",)),
    ("PHP", "Philippians", 4, "Phil", ("php", "pp")),
    ("COL", "Colossians", 4, "Col", ()),
    ("1TH", "1 Thessalonians", 5, "1Thess", ("1 th", "1 thes", "1 thess")),
    ("2TH", "2 Thessalonians", 3, "2Thess", ("2 th", "2 thes", "2 thess")),
    ("1TI", "1 Timothy", 6, "1Tim", ("1 ti", "1 tim")),
    ("2TI", "2 Timothy", 4, "2Tim", ("2 ti", "2 tim")),
    ("TIT", "Titus", 3, "Titus", ("ti",)),
    ("PHM", "Philemon", 1, "Phlm", ("philem", "phm")),
    ("HEB", "Hebrews", 13, "Heb", ()),
    ("JAS", "James", 5, "Jas", ("jam", "jms", "jm")),
    ("1PE", "1 Peter", 5, "1Pet", ("1 pe", "1 pet", "1 pt")),
    ("2PE", "2 Peter", 3, "2Pet", ("2 pe", "2 pet", "2 pt")),
    ("1JN", "1 John", 5, "1John", ("1 jn", "1 jhn", "1 jo")),
    ("2JN", "2 John", 1, "2John", ("2 jn", "2 jhn", "2 jo")),
    ("3JN", "3 John", 1, "3John", ("3 jn", "3 jhn", "3 jo")),
    ("JUD", "Jude", 1, "Jude", ("jd",)),
    ("REV", "Revelation", 22, "Rev", ("revelations", "re", "apocalypse")),
)

_ORDINAL_PREFIXES = {
    "1": ("i", "first"),
    "2": ("ii", "second"),
    "3": ("iii", "third"),
}

_WHITESPACE = re.compile(r"\s+")


def _alias_key(token: str) -> str:
    """Fold a book token for alias lookup: lowercase, no periods, single spaces."""
    return _WHITESPACE.sub(" ", token.replace(".", " ").strip().lower())


def _expand_alias(alias: str) -> List[str]:
    """Return the lookup keys an alias should answer to."""
    key = _alias_key(alias)
    keys = [key, key.replace(" ", "")]
    prefix, _, rest = key.partition(" ")
    if rest and prefix in _ORDINAL_PREFIXES:
        for ordinal in _ORDINAL_PREFIXES[prefix]:
            keys.append(f"{ordinal} {rest}")
    return keys


def _build_registry() -> Tuple[Mapping[str, BookInfo], Mapping[str, str]]:
    books: Dict[str, BookInfo] = {}
    index: Dict[str, str] = {}

    for code, name, chapters, osis_id, extra in _BOOK_TABLE:
        testament = _OT if len(books) < 39 else _NT
        info = BookInfo(
            id=code,
            name=name,
            chapters=chapters,
            testament=testament,
            osis_id=osis_id,
            aliases=(name, osis_id) + extra,
        )
        books[code] = info

    # Codes and names are registered before abbreviations so they win ties
    for info in books.values():
        for key in _expand_alias(info.id) + _expand_alias(info.name):
            index.setdefault(key, info.id)
    for info in books.values():
        for alias in info.aliases:
            for key in _expand_alias(alias):
                index.setdefault(key, info.id)

    return MappingProxyType(books), MappingProxyType(index)


BOOKS, _ALIAS_INDEX = _build_registry()

ALL_PROTESTANT_BOOKS: Tuple[str, ...] = tuple(BOOKS)
OLD_TESTAMENT_BOOKS: Tuple[str, ...] = tuple(
    code for code, info in BOOKS.items() if info.is_old_testament
)
NEW_TESTAMENT_BOOKS: Tuple[str, ...] = tuple(
    code for code, info in BOOKS.items() if not info.is_old_testament
)

_OSIS_INDEX: Mapping[str, str] = MappingProxyType(
    {info.osis_id.lower(): code for code, info in BOOKS.items()}
)


def normalize(raw: Optional[str]) -> str:
    """
    Normalize a raw book token to its canonical code.

    Accepts canonical codes in any case, full English names, numeric-prefixed
    names ("1 Samuel", "I Samuel", "1Sam"), common abbreviations and OSIS
    ids. Returns an empty string for empty or unrecognized input.
    """
    if not isinstance(raw, str):
        return ""
    token = raw.strip()
    if not token:
        return ""

    upper = token.upper()
    if upper in BOOKS:
        return upper

    key = _alias_key(token)
    return _ALIAS_INDEX.get(key) or _ALIAS_INDEX.get(key.replace(" ", ""), "")


def from_osis(osis_id: str) -> str:
    """Map an OSIS book id ("Gen", "1Sam") to its canonical code, or ""."""
    return _OSIS_INDEX.get(osis_id.strip().lower(), "") if osis_id else ""


def get_book(book_id: str) -> Optional[BookInfo]:
    return BOOKS.get(book_id.upper()) if book_id else None


def is_valid_book_id(book_id: Optional[str]) -> bool:
    return bool(book_id) and book_id.upper() in BOOKS


def display_name(book_id: str) -> str:
    """Display name for a canonical code; unknown codes are returned as given."""
    info = get_book(book_id)
    return info.name if info else book_id


def chapter_count(book_id: str) -> int:
    """Number of chapters in the book, or 0 for an unknown code."""
    info = get_book(book_id)
    return info.chapters if info else 0


def is_old_testament(book_id: str) -> bool:
    info = get_book(book_id)
    return info.is_old_testament if info else False


def testament(book_id: str) -> Optional[Testament]:
    info = get_book(book_id)
    return info.testament if info else None


def select_books(raw: Optional[str]) -> List[str]:
    """
    Expand a book selection string into canonical codes.

    "OT" and "NT" select a whole testament, "ALL" or an empty selection
    selects the full canon, and anything else is read as a comma separated
    list of book tokens. Unrecognized tokens are dropped.
    """
    if raw is None or not raw.strip():
        return list(ALL_PROTESTANT_BOOKS)

    selected: List[str] = []
    for token in raw.split(","):
        keyword = token.strip().upper()
        if keyword == "OT":
            codes: Iterable[str] = OLD_TESTAMENT_BOOKS
        elif keyword == "NT":
            codes = NEW_TESTAMENT_BOOKS
        elif keyword == "ALL":
            codes = ALL_PROTESTANT_BOOKS
        else:
            code = normalize(token)
            codes = (code,) if code else ()
        for code in codes:
            if code not in selected:
                selected.append(code)
    return selected
