"""
Daily verse selection.

A fixed reading list indexed by day of year, so every caller sees the same
verse on the same (UTC) day.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional, Tuple

from data.schemas import Reference

DailyEntry = Tuple[str, int, int]

DAILY_VERSES: Tuple[DailyEntry, ...] = (
    ("JHN", 3, 16),
    ("PSA", 23, 1),
    ("ROM", 8, 28),
    ("PHP", 4, 13),
    ("1CO", 13, 4),
    ("PSA", 119, 105),
    ("PRO", 3, 5),
    ("ISA", 40, 31),
    ("JER", 29, 11),
    ("MAT", 28, 20),
    ("2TI", 3, 16),
    ("HEB", 11, 1),
    ("JAS", 1, 17),
    ("1PE", 5, 7),
    ("1JN", 4, 19),
    ("REV", 21, 4),
    ("PSA", 46, 10),
    ("ECC", 3, 1),
    ("GAL", 5, 22),
    ("EPH", 2, 8),
)


def select_daily_reference(day: Optional[dt.date] = None) -> Reference:
    """Reference for ``day`` (today in UTC by default)."""
    day = day or dt.datetime.now(dt.timezone.utc).date()
    book_id, chapter, verse = DAILY_VERSES[day.timetuple().tm_yday % len(DAILY_VERSES)]
    return Reference(book_id, chapter, verse, verse)
