"""
Property-Based Tests for scripture parsing and verse windows.
"""
from xml.sax.saxutils import escape

from hypothesis import given, settings
from hypothesis import strategies as st

from parsing.markup import collapse_whitespace
from parsing.scripture import ScriptureIndex, parse_scripture
from tests.property.strategies import verse_texts


def osis_document(texts):
    verses = "".join(
        f'<verse osisID="Ps.119.{number}">{escape(text)}</verse>'
        for number, text in enumerate(texts, start=1)
    )
    return (
        '<osis xmlns="http://www.bibletechnologies.net/2003/OSIS/namespace"><osisText>'
        f'<div type="book" osisID="Ps"><chapter osisID="Ps.119">{verses}</chapter></div>'
        "</osisText></osis>"
    )


class TestParseScripture:

    @given(st.lists(verse_texts(), min_size=1, max_size=30))
    @settings(max_examples=100)
    def test_verse_text_whitespace_collapsed(self, texts):
        index = parse_scripture(osis_document(texts))

        assert index.books() == ["PSA"]
        assert len(index) == len(texts)
        for number, text in enumerate(texts, start=1):
            assert index.verse_text("PSA", 119, number) == collapse_whitespace(text)


class TestVerseWindow:

    @given(
        st.sets(st.integers(min_value=1, max_value=176), max_size=40),
        st.integers(min_value=1, max_value=176),
        st.integers(min_value=0, max_value=176),
    )
    def test_window_is_ascending_and_bounded(self, numbers, start, end):
        index = ScriptureIndex()
        for number in numbers:
            index.add("PSA", 119, number, f"verse {number}")

        window = [number for number, _ in index.verses("PSA", 119, start, end)]

        assert window == sorted(n for n in numbers if start <= n <= end)
