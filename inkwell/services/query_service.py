"""
Inkwell Backend - Query Service (Listings)
==========================================

What:  The canned read queries behind the landing page and category pages:
       latest, popular, featured, per-category samples, category counts,
       paginated category listing, and the id list used for static builds.
How:   One find() or aggregate() per operation. Category filters are built as
       anchored, escaped, case-insensitive regexes so "tech" matches a stored
       "Tech" without normalizing what was stored.
Who:   Called by routes/blogs.py.

Description extraction:
    The category listing returns card data plus a `description` computed from
    the blog body. Blocks are scanned in order; the first paragraph wins
    outright, otherwise the first quote, otherwise the first header, otherwise
    null. It runs in Python over the projected `blog.blocks` so the rule lives
    in one testable function instead of a nested $reduce expression.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection

from inkwell.config import settings
from inkwell.exceptions import DatabaseError, InkwellError, ValidationError
from inkwell.schemas.blog import BlogResponse, CategoryCount
from inkwell.services.documents import (
    CREATED_AT,
    REACT_COUNT,
    SUMMARY_PROJECTION,
    block_text,
    iter_blocks,
)

logger = logging.getLogger(__name__)

DESCRIPTION_PRIORITY = ("paragraph", "quote", "header")

# Response key of the cross-category sample in sample_by_categories()
RANDOM_KEY = "random"

# Newest first; _id breaks ties between blogs created in the same millisecond
NEWEST_FIRST = [(CREATED_AT, -1), ("_id", -1)]


def category_filter(category: str) -> Dict[str, Any]:
    """Case-insensitive exact match on the category field."""
    return {"category": {"$regex": f"^{re.escape(category)}$", "$options": "i"}}


def extract_description(blocks: Iterable[Dict[str, Any]]) -> Optional[str]:
    """
    Pick the description text for a blog card.

    Only blocks carrying a text payload qualify.

    >>> extract_description([{"type": "header", "data": {"text": "H"}},
    ...                      {"type": "quote", "data": {"text": "Q"}}])
    'Q'
    """
    first_seen: Dict[str, str] = {}
    for block in blocks:
        kind = block.get("type")
        if kind not in DESCRIPTION_PRIORITY or kind in first_seen:
            continue
        text = block_text(block)
        if text is None:
            continue
        if kind == "paragraph":
            return text
        first_seen[kind] = text

    for kind in DESCRIPTION_PRIORITY[1:]:
        if kind in first_seen:
            return first_seen[kind]
    return None


class QueryService:
    """Read-only listing queries over the blog collection."""

    async def latest(self, collection: AsyncIOMotorCollection) -> List[BlogResponse]:
        limit = settings.latest_limit
        try:
            cursor = collection.find({}).sort(NEWEST_FIRST).limit(limit)
            docs = await cursor.to_list(length=limit)
        except Exception as e:
            logger.error("Failed to fetch latest blogs: %s", str(e))
            raise DatabaseError(message="Failed to fetch latest blogs", details=str(e))
        return [BlogResponse.model_validate(doc) for doc in docs]

    async def popular(self, collection: AsyncIOMotorCollection) -> List[BlogResponse]:
        limit = settings.popular_limit
        logger.debug("Fetching %d popular blogs", limit)
        try:
            cursor = (
                collection.find({}, projection=SUMMARY_PROJECTION)
                .sort([(REACT_COUNT, -1), (CREATED_AT, -1)])
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except Exception as e:
            logger.error("Failed to fetch popular blogs: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch popular blogs", details=str(e))
        return [BlogResponse.model_validate(doc) for doc in docs]

    async def featured(self, collection: AsyncIOMotorCollection) -> List[BlogResponse]:
        """Blogs listed in FEATURED_BLOG_IDS, in configured order."""
        ids = settings.featured_ids_list
        if not ids:
            return []
        try:
            docs = await collection.find({"_id": {"$in": ids}}).to_list(length=len(ids))
        except Exception as e:
            logger.error("Failed to fetch featured blogs: %s", str(e))
            raise DatabaseError(message="Failed to fetch featured blogs", details=str(e))

        by_id = {doc["_id"]: doc for doc in docs}
        return [BlogResponse.model_validate(by_id[oid]) for oid in ids if oid in by_id]

    async def sample_by_categories(
        self,
        collection: AsyncIOMotorCollection,
        categories: Any,
        random: Optional[int] = None,
    ) -> Dict[str, List[BlogResponse]]:
        """
        Random samples per category, plus an optional sample across all blogs.

        Args:
            categories: mapping of category name to sample size
            random: size of the extra cross-category sample (omitted when falsy)

        Returns:
            {"<category>": [...], ..., "random": [...]}
        """
        if not isinstance(categories, dict):
            raise ValidationError(message="Invalid categories format", field="categories")
        for name, count in categories.items():
            if not _is_count(count):
                raise ValidationError(
                    message="Invalid categories format",
                    field="categories",
                    context={"category": name, "count": count},
                )
        if random is not None and not _is_count(random):
            raise ValidationError(message="Invalid random count", field="random")
        if random and RANDOM_KEY in categories:
            raise ValidationError(
                message=f"Category '{RANDOM_KEY}' cannot be combined with a random sample",
                field="categories",
            )

        response: Dict[str, List[BlogResponse]] = {}
        try:
            for name, count in categories.items():
                response[name] = await self._sample(collection, category_filter(name), count)
            if random:
                response[RANDOM_KEY] = await self._sample(collection, {}, random)
        except InkwellError:
            raise
        except Exception as e:
            logger.error("Failed to sample blogs: %s", str(e))
            raise DatabaseError(message="Failed to fetch blogs", details=str(e))
        return response

    async def _sample(
        self, collection: AsyncIOMotorCollection, match: Dict[str, Any], size: int
    ) -> List[BlogResponse]:
        if size == 0:
            return []
        pipeline: List[Dict[str, Any]] = []
        if match:
            pipeline.append({"$match": match})
        pipeline.append({"$sample": {"size": size}})
        docs = await collection.aggregate(pipeline).to_list(length=None)
        return [BlogResponse.model_validate(doc) for doc in docs]

    async def category_counts(self, collection: AsyncIOMotorCollection) -> List[CategoryCount]:
        """Number of blogs per category, grouped case-insensitively."""
        pipeline = [
            {"$match": {"category": {"$type": "string"}}},
            {
                "$group": {
                    "_id": {"$toLower": "$category"},
                    "category": {"$first": "$category"},
                    "count": {"$sum": 1},
                }
            },
            {"$sort": {"count": -1, "_id": 1}},
            {"$project": {"_id": 0, "category": 1, "count": 1}},
        ]
        try:
            rows = await collection.aggregate(pipeline).to_list(length=None)
        except Exception as e:
            logger.error("Failed to count categories: %s", str(e))
            raise DatabaseError(message="Failed to fetch category counts", details=str(e))
        return [CategoryCount(category=row.get("category"), count=row["count"]) for row in rows]

    async def by_category(
        self,
        collection: AsyncIOMotorCollection,
        category: Optional[str],
        page: int = 1,
        limit: Optional[int] = None,
    ) -> List[BlogResponse]:
        """
        One page of a category, newest first, with derived descriptions.

        skip = (page - 1) * limit; limit defaults to DEFAULT_PAGE_SIZE and is
        capped at MAX_PAGE_SIZE.
        """
        if category is None or not category.strip():
            raise ValidationError(message="Category is required", field="category")
        if limit is None:
            limit = settings.default_page_size
        if page < 1:
            raise ValidationError(message="Page must be 1 or greater", field="page")
        if limit < 1:
            raise ValidationError(message="Limit must be 1 or greater", field="limit")
        limit = min(limit, settings.max_page_size)
        skip = (page - 1) * limit

        projection = dict(SUMMARY_PROJECTION)
        projection["blog.blocks"] = 1

        try:
            cursor = (
                collection.find(category_filter(category.strip()), projection=projection)
                .sort(NEWEST_FIRST)
                .skip(skip)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except Exception as e:
            logger.error("Failed to fetch category '%s': %s", category, str(e))
            raise DatabaseError(message="Failed to fetch blogs by category", details=str(e))

        results = []
        for doc in docs:
            description = extract_description(iter_blocks(doc))
            doc.pop("blog", None)
            doc["description"] = description
            results.append(BlogResponse.model_validate(doc))
        return results

    async def all_ids(self, collection: AsyncIOMotorCollection) -> List[BlogResponse]:
        try:
            docs = await collection.find({}, projection={"_id": 1, "id": 1}).to_list(length=None)
        except Exception as e:
            logger.error("Failed to fetch blog ids: %s", str(e))
            raise DatabaseError(message="Failed to fetch blog ids", details=str(e))
        return [BlogResponse.model_validate(doc) for doc in docs]


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


query_service = QueryService()
