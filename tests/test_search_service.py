"""
Inkwell Backend - Fuzzy Search Unit Tests
=========================================

Uses real rapidfuzz scoring; only the collection is mocked.

What we test:
    ✅ Typos still match ("pyhton" → "Python tips")
    ✅ Matches in tags, author and block text, case-insensitively
    ✅ Better matches rank first
    ✅ Short fields do not match every query containing them
    ✅ Blank or non-string queries are rejected
"""

import pytest
from bson import ObjectId

from inkwell.exceptions import DatabaseError, ValidationError
from inkwell.services.search_service import FuzzyIndex, SearchService, field_score


def _doc(title, text="", **extra):
    doc = {
        "_id": ObjectId(),
        "title": title,
        "category": extra.pop("category", "Misc"),
        "authorName": extra.pop("authorName", "Mia"),
        "tags": extra.pop("tags", []),
        "blog": {"blocks": [{"type": "paragraph", "data": {"text": text}}]},
    }
    doc.update(extra)
    return doc


UNRELATED = _doc(
    "Slow weekends", "Seaside walks and calm weekends", category="Leisure", tags=["sea"]
)


class TestFieldScore:
    def test_identical(self):
        assert field_score("python", "python") == 100

    def test_substring_of_longer_field(self):
        assert field_score("python", "learning python today") == 100

    def test_short_field_uses_full_ratio(self):
        assert field_score("python tips", "py") < 70


class TestFuzzyIndex:
    def test_typo_matches(self):
        target = _doc("Python tips")
        index = FuzzyIndex([UNRELATED, target], threshold=0.3)

        hits = index.search("pyhton")

        assert [doc for doc, _ in hits] == [target]

    def test_exact_ranks_above_fuzzy(self):
        fuzzy = _doc("Scripts", "notes about pythn scripts")
        exact = _doc("Learning Python")
        index = FuzzyIndex([fuzzy, exact], threshold=0.3)

        hits = index.search("python")

        assert [doc["title"] for doc, _ in hits] == ["Learning Python", "Scripts"]
        assert hits[0][1] > hits[1][1]

    def test_matches_tags_author_and_body(self):
        by_tag = _doc("One", tags=["kubernetes"])
        by_author = _doc("Two", authorName="Grace Hopper")
        by_body = _doc("Three", "A short history of COBOL compilers")
        index = FuzzyIndex([by_tag, by_author, by_body, UNRELATED], threshold=0.3)

        assert [d for d, _ in index.search("Kubernetes")] == [by_tag]
        assert [d for d, _ in index.search("hopper")] == [by_author]
        assert [d for d, _ in index.search("cobol")] == [by_body]

    def test_short_tag_does_not_match_longer_query(self):
        doc = _doc("Garden ideas", category="Home", authorName="Lee", tags=["py"])
        index = FuzzyIndex([doc], threshold=0.3)

        assert index.search("python tips") == []

    def test_zero_threshold_is_exact_only(self):
        index = FuzzyIndex([_doc("Python tips")], threshold=0.0)

        assert index.search("pyhton") == []
        assert len(index.search("python")) == 1

    def test_punctuation_only_query(self):
        index = FuzzyIndex([_doc("Python tips")], threshold=0.3)

        assert index.search("?!") == []

    def test_document_without_body(self):
        doc = {"_id": ObjectId(), "title": "Python tips"}
        index = FuzzyIndex([doc], threshold=0.3)

        assert len(index.search("python")) == 1


class TestSearchService:
    def setup_method(self):
        self.service = SearchService()

    @pytest.mark.asyncio
    async def test_returns_matching_blogs(self, mock_collection, make_cursor, sample_blog_doc):
        mock_collection.find.return_value = make_cursor([UNRELATED, sample_blog_doc])

        result = await self.service.search(mock_collection, "fastapi")

        assert [blog.id for blog in result] == ["blog-001"]
        assert result[0].mongo_id == str(sample_blog_doc["_id"])
        mock_collection.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_no_matches(self, mock_collection, make_cursor):
        mock_collection.find.return_value = make_cursor([UNRELATED])

        assert await self.service.search(mock_collection, "quantum") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [None, "", "   ", 42, ["python"]])
    async def test_query_required(self, mock_collection, query):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.search(mock_collection, query)
        assert exc_info.value.message == "Search query is required"
        mock_collection.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_driver_error(self, mock_collection):
        mock_collection.find.side_effect = RuntimeError("cursor died")

        with pytest.raises(DatabaseError):
            await self.service.search(mock_collection, "python")
