"""
Property-Based Tests for the book registry and reference validation.
"""
import pytest
from hypothesis import example, given, settings
from hypothesis import strategies as st

from core.errors import BibleValidationError
from core.validation import parse_reference, validate_chapter, validate_translation_id
from data import books
from tests.property.strategies import (
    ALL_BOOKS,
    TRANSLATION_ID_ALPHABET,
    book_and_chapter,
    mixed_case,
    translation_ids,
)


class TestBookNormalization:
    """Normalization of raw book tokens."""

    @given(mixed_case(st.sampled_from(ALL_BOOKS)))
    @settings(max_examples=200)
    def test_code_in_any_case(self, token):
        assert books.normalize(token) == token.upper()

    @given(mixed_case(st.sampled_from([books.display_name(code) for code in ALL_BOOKS])))
    @settings(max_examples=200)
    def test_display_name_in_any_case(self, name):
        code = books.normalize(name)
        assert books.display_name(code).lower() == name.lower()

    @given(st.text(alphabet=" \t\r\n", max_size=10))
    def test_blank_is_empty(self, token):
        assert books.normalize(token) == ""

    @given(st.text(max_size=40))
    @settings(max_examples=300)
    @example("")
    @example("1 ")
    @example("ΓΕΝ")
    def test_never_raises(self, token):
        result = books.normalize(token)
        assert result == "" or result in books.BOOKS


class TestChapterValidation:
    """Chapter bounds come from the registry."""

    @given(book_and_chapter(valid=True))
    def test_valid_chapters_accepted(self, pair):
        book_id, chapter = pair
        validate_chapter(book_id, chapter)

    @given(book_and_chapter(valid=False))
    def test_beyond_last_chapter_names_maximum(self, pair):
        book_id, chapter = pair
        with pytest.raises(BibleValidationError) as exc_info:
            validate_chapter(book_id, chapter)
        assert f"Maximum chapter is {books.chapter_count(book_id)}." in exc_info.value.message

    @given(st.sampled_from(ALL_BOOKS), st.integers(max_value=0))
    def test_non_positive_chapter_rejected(self, book_id, chapter):
        with pytest.raises(BibleValidationError):
            validate_chapter(book_id, chapter)


class TestTranslationIds:

    @given(translation_ids())
    def test_valid_ids_lowercased(self, identifier):
        assert validate_translation_id(identifier) == identifier.lower()

    @given(st.text(min_size=2, max_size=20).filter(
        lambda s: s.strip() and any(c not in TRANSLATION_ID_ALPHABET for c in s)
    ))
    def test_foreign_characters_rejected(self, identifier):
        with pytest.raises(BibleValidationError):
            validate_translation_id(identifier)

    @given(st.text(alphabet=TRANSLATION_ID_ALPHABET, min_size=21, max_size=40))
    def test_too_long_rejected(self, identifier):
        with pytest.raises(BibleValidationError):
            validate_translation_id(identifier)


class TestParseReference:

    @given(
        book_and_chapter(valid=True),
        st.integers(min_value=1, max_value=176),
        st.integers(min_value=0, max_value=20),
        st.booleans(),
    )
    @settings(max_examples=200)
    def test_well_formed_references(self, pair, start, span, use_name):
        book_id, chapter = pair
        end = min(start + span, 176)
        book = books.display_name(book_id) if use_name else book_id.lower()

        reference = parse_reference(f"{book} {chapter}:{start}-{end}")

        assert reference.book_id == book_id
        assert reference.chapter == chapter
        assert (reference.verse_start, reference.verse_end) == (start, end)

    @given(st.text(max_size=60))
    @settings(max_examples=300)
    def test_arbitrary_text_parses_or_raises_validation_error(self, text):
        try:
            reference = parse_reference(text)
        except BibleValidationError:
            return
        assert reference.book_id in books.BOOKS
