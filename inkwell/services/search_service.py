"""
Inkwell Backend - Fuzzy Search Service
======================================

What:  Typo-tolerant search across title, category, tags, author name and the
       text of every body block.
How:   Loads the whole collection, scores each document with rapidfuzz, and
       keeps documents whose best field score clears the threshold.

Scoring:
    Query and fields go through rapidfuzz's default processor first
    (lower-cased, punctuation replaced by spaces). A field at least as long as
    the query is scored with `fuzz.partial_ratio`, so the query may match any
    part of it regardless of position. A field shorter than the query is
    scored with `fuzz.ratio`; a two-letter tag must not match every query that
    happens to contain those letters. A document's score is its best field
    score.

    SEARCH_THRESHOLD is a distance in [0, 1] (0 = exact only). A document
    matches when score >= (1 - threshold) * 100; the default 0.3 therefore
    needs a 70/100 similarity.

Ranking:
    Best score first. Python's sort is stable, so equally scored documents keep
    the order the collection returned them in.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection
from rapidfuzz import fuzz, utils

from inkwell.config import settings
from inkwell.exceptions import DatabaseError, ValidationError
from inkwell.schemas.blog import BlogResponse
from inkwell.services.documents import searchable_fields

logger = logging.getLogger(__name__)


def field_score(query: str, field: str) -> float:
    """Similarity of two already-processed strings, 0-100."""
    if len(field) < len(query):
        return fuzz.ratio(query, field)
    return fuzz.partial_ratio(query, field)


class FuzzyIndex:
    """In-memory index over a snapshot of blog documents."""

    def __init__(self, documents: List[Dict[str, Any]], threshold: float):
        self.documents = documents
        self.score_cutoff = (1.0 - threshold) * 100
        self._fields = [self._prepare(doc) for doc in documents]

    @staticmethod
    def _prepare(doc: Dict[str, Any]) -> List[str]:
        processed = (utils.default_process(field) for field in searchable_fields(doc))
        return [field for field in processed if field]

    def score(self, query: str, position: int) -> Optional[float]:
        """Best field score of one document, or None below the cutoff."""
        best = max(
            (field_score(query, field) for field in self._fields[position]),
            default=0.0,
        )
        if best < self.score_cutoff:
            return None
        return best

    def search(self, query: str) -> List[Tuple[Dict[str, Any], float]]:
        processed = utils.default_process(query)
        if not processed:
            return []
        hits = []
        for position, doc in enumerate(self.documents):
            score = self.score(processed, position)
            if score is not None:
                hits.append((doc, score))
        hits.sort(key=lambda hit: hit[1], reverse=True)
        return hits


class SearchService:
    async def search(self, collection: AsyncIOMotorCollection, query: Any) -> List[BlogResponse]:
        """
        Raises:
            ValidationError: query missing, not a string, or blank.
            DatabaseError: loading the collection failed.
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError(message="Search query is required", field="query")
        query = query.strip()

        try:
            documents = await collection.find({}).to_list(length=None)
        except Exception as e:
            logger.error("Failed to load blogs for search: %s", str(e))
            raise DatabaseError(message="Failed to fetch blogs", details=str(e))

        index = FuzzyIndex(documents, threshold=settings.search_threshold)
        hits = index.search(query)
        logger.info("Search %r matched %d of %d blogs", query, len(hits), len(documents))
        return [BlogResponse.model_validate(doc) for doc, _ in hits]


search_service = SearchService()
