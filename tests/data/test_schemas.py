"""
Tests for data/schemas.py - response records.
"""
from data.books import Testament
from data.schemas import Book, BookChapter, Reference, Translation, Verse


class TestTranslation:

    def test_defaults(self):
        translation = Translation("kjv", "King James Version")
        assert translation.language == "english"
        assert translation.language_code == "en"
        assert translation.license == "Public Domain"

    def test_to_dict_hides_document_key(self):
        translation = Translation("kjv", "KJV", document_key="bibles/kjv.xml")
        data = translation.to_dict()
        assert "document_key" not in data
        assert data["identifier"] == "kjv"

    def test_document_key_not_part_of_equality(self):
        assert Translation("kjv", "KJV", document_key="a.xml") == Translation("kjv", "KJV", document_key="b.xml")


class TestRecords:

    def test_book_testament_serialized_as_code(self):
        book = Book("GEN", "Genesis", 50, Testament.OLD_TESTAMENT)
        assert book.to_dict() == {"book_id": "GEN", "name": "Genesis", "chapters": 50, "testament": "OT"}

    def test_chapter_without_url(self):
        assert BookChapter("OBA", "Obadiah", 1).to_dict()["url"] is None

    def test_verse_reference(self):
        verse = Verse("JHN", "John", 3, 16, "For God so loved the world")
        assert verse.reference == "John 3:16"
        assert verse.to_dict()["verse_number"] == 16


class TestReference:

    def test_labels(self):
        assert Reference("JHN", 3).label == "John 3"
        assert Reference("JHN", 3, 16).label == "John 3:16"
        assert Reference("JHN", 3, 16, 16).label == "John 3:16"
        assert Reference("JHN", 3, 16, 18).label == "John 3:16-18"

    def test_to_dict_includes_label(self):
        data = Reference("1SA", 17, 4, 7).to_dict()
        assert data["reference"] == "1 Samuel 17:4-7"
        assert data["book_id"] == "1SA"
