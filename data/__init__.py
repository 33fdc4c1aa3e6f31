"""
Data Module

Static book registry and the immutable records produced by the resolvers.

Architecture:
- books.py: 66-book Protestant canon registry with alias normalization
- schemas.py: Translation, Book, BookChapter, Verse and Reference records
"""

from data.books import (
    ALL_PROTESTANT_BOOKS,
    BOOKS,
    NEW_TESTAMENT_BOOKS,
    OLD_TESTAMENT_BOOKS,
    BookInfo,
    Testament,
    chapter_count,
    display_name,
    get_book,
    is_old_testament,
    is_valid_book_id,
    normalize,
    select_books,
)
from data.schemas import (
    Book,
    BookChapter,
    Reference,
    Translation,
    Verse,
)

__all__ = [
    "ALL_PROTESTANT_BOOKS",
    "BOOKS",
    "NEW_TESTAMENT_BOOKS",
    "OLD_TESTAMENT_BOOKS",
    "BookInfo",
    "Testament",
    "chapter_count",
    "display_name",
    "get_book",
    "is_old_testament",
    "is_valid_book_id",
    "normalize",
    "select_books",
    "Book",
    "BookChapter",
    "Reference",
    "Translation",
    "Verse",
]
