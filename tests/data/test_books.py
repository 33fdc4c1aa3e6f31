"""
Tests for data/books.py - Book Metadata Registry.

Covers:
- Canon size and testament split
- Normalization of codes, names, abbreviations and OSIS ids
- Lookups for unknown codes
- Testament shorthand selection
"""
import pytest

from data import books
from data.books import Testament


class TestRegistry:
    """Tests for the static book table."""

    def test_canon_has_66_books(self):
        """The protestant canon has 39 OT and 27 NT books."""
        assert len(books.ALL_PROTESTANT_BOOKS) == 66
        assert len(books.OLD_TESTAMENT_BOOKS) == 39
        assert len(books.NEW_TESTAMENT_BOOKS) == 27

    def test_canonical_order(self):
        assert books.ALL_PROTESTANT_BOOKS[0] == "GEN"
        assert books.ALL_PROTESTANT_BOOKS[38] == "MAL"
        assert books.ALL_PROTESTANT_BOOKS[39] == "MAT"
        assert books.ALL_PROTESTANT_BOOKS[-1] == "REV"

    @pytest.mark.parametrize("code,chapters", [
        ("GEN", 50),
        ("PSA", 150),
        ("OBA", 1),
        ("JHN", 21),
        ("3JN", 1),
        ("REV", 22),
    ])
    def test_chapter_counts(self, code, chapters):
        assert books.chapter_count(code) == chapters

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            books.BOOKS["XXX"] = books.BOOKS["GEN"]

    def test_testament(self):
        assert books.testament("GEN") == Testament.OLD_TESTAMENT
        assert books.testament("MAT") == Testament.NEW_TESTAMENT
        assert books.is_old_testament("MAL") is True
        assert books.is_old_testament("MAT") is False


class TestNormalize:
    """Tests for normalize()."""

    @pytest.mark.parametrize("code", books.ALL_PROTESTANT_BOOKS)
    def test_codes_in_any_case(self, code):
        """Every canonical code normalizes to itself regardless of case."""
        assert books.normalize(code) == code
        assert books.normalize(code.lower()) == code
        assert books.normalize(f"  {code.title()} ") == code

    @pytest.mark.parametrize("raw,expected", [
        ("Genesis", "GEN"),
        ("john", "JHN"),
        ("1 Samuel", "1SA"),
        ("I Samuel", "1SA"),
        ("1Sam", "1SA"),
        ("First Kings", "1KI"),
        ("Song of Songs", "SNG"),
        ("Psalm", "PSA"),
        ("Jn", "JHN"),
        ("Phil.", "PHP"),
        ("Revelations", "REV"),
    ])
    def test_names_and_aliases(self, raw, expected):
        assert books.normalize(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "XYZ", "Hezekiah", 42])
    def test_unknown_returns_empty(self, raw):
        """Empty or unknown input yields the empty sentinel, never an error."""
        assert books.normalize(raw) == ""

    def test_from_osis(self):
        assert books.from_osis("Gen") == "GEN"
        assert books.from_osis("1Sam") == "1SA"
        assert books.from_osis("Ps") == "PSA"
        assert books.from_osis("") == ""
        assert books.from_osis("Tob") == ""


class TestLookups:
    """Tests for lookups on unknown codes."""

    def test_display_name(self):
        assert books.display_name("JHN") == "John"
        assert books.display_name("jhn") == "John"

    def test_unknown_code(self):
        assert books.display_name("XYZ") == "XYZ"
        assert books.chapter_count("XYZ") == 0
        assert books.get_book("XYZ") is None
        assert books.testament("XYZ") is None
        assert books.is_valid_book_id("XYZ") is False
        assert books.is_valid_book_id(None) is False


class TestSelectBooks:
    """Tests for select_books()."""

    def test_testament_shorthand(self):
        assert books.select_books("OT") == list(books.OLD_TESTAMENT_BOOKS)
        assert books.select_books("nt") == list(books.NEW_TESTAMENT_BOOKS)

    def test_empty_selects_full_canon(self):
        assert books.select_books(None) == list(books.ALL_PROTESTANT_BOOKS)
        assert books.select_books("") == list(books.ALL_PROTESTANT_BOOKS)
        assert books.select_books("ALL") == list(books.ALL_PROTESTANT_BOOKS)

    def test_comma_list_drops_unknown_and_duplicates(self):
        assert books.select_books("John, Romans, xyz, JHN") == ["JHN", "ROM"]

    def test_mixed_shorthand(self):
        selected = books.select_books("PSA,NT")
        assert selected[0] == "PSA"
        assert len(selected) == 28
