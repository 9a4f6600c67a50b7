"""
Inkwell Backend - Blog Service (CRUD)
=====================================

What:  Create, read, update and delete single blog documents.
How:   Each method runs one MongoDB operation against the collection passed in
       by the route (FastAPI dependency), and converts driver failures into
       DatabaseError so the global handler answers 500 with the driver message.
Who:   Called by the handlers in routes/blogs.py.

Error Handling Strategy:
    ValidationError / NotFoundError are raised directly and propagate as-is.
    Anything else raised by the driver is logged and wrapped in DatabaseError.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorCollection

from inkwell.exceptions import DatabaseError, InkwellError, NotFoundError, ValidationError
from inkwell.schemas.blog import (
    BlogCreate,
    BlogCreatedResponse,
    BlogResponse,
    BlogUpdate,
    MessageResponse,
)
from inkwell.services.documents import (
    AUTHOR_EMAIL,
    CREATED_AT,
    REACT_COUNT,
    REACTED_USERS,
    parse_object_id,
)

logger = logging.getLogger(__name__)

# (attribute on BlogCreate, stored key)
REQUIRED_FIELDS = (
    ("id", "id"),
    ("title", "title"),
    ("blog", "blog"),
    ("category", "category"),
    ("author_name", "authorName"),
)


class BlogService:
    """
    Stateless CRUD operations on the blog collection.

    Responsibilities:
        - create_blog(): validate required fields, insert with zeroed reactions
        - get_blog(): single document by store-native id
        - update_blog(): partial $set of the provided fields
        - delete_blog(): remove by store-native id
        - list_author_blogs(): documents written by one email
    """

    async def create_blog(
        self, collection: AsyncIOMotorCollection, payload: BlogCreate
    ) -> BlogCreatedResponse:
        """
        Insert a new blog.

        Raises:
            ValidationError: a required field is missing or blank, or another
                             blog already uses the same application id.
            DatabaseError: the insert failed.
        """
        missing = [
            wire_name
            for attr, wire_name in REQUIRED_FIELDS
            if _is_blank(getattr(payload, attr))
        ]
        if missing:
            raise ValidationError(
                message="Required fields are missing",
                context={"missing": missing},
            )

        try:
            # id uniqueness is checked here; there is no unique index behind it
            existing = await collection.find_one({"id": payload.id}, projection={"_id": 1})
            if existing is not None:
                raise ValidationError(
                    message=f"A blog with id '{payload.id}' already exists",
                    field="id",
                )

            document: Dict[str, Any] = {
                "id": payload.id,
                "title": payload.title,
                "blog": payload.blog,
                "thumbnail": payload.thumbnail or "",
                "category": payload.category,
                "tags": payload.tags or [],
                "authorName": payload.author_name,
                AUTHOR_EMAIL: payload.author_email,
                CREATED_AT: datetime.now(timezone.utc),
                REACT_COUNT: 0,
                REACTED_USERS: [],
            }
            result = await collection.insert_one(document)
            logger.info("Blog created: %s (custom id %s)", result.inserted_id, payload.id)

            return BlogCreatedResponse(
                blog_id=str(result.inserted_id),
                custom_id=payload.id,
            )

        except InkwellError:
            raise
        except Exception as e:
            logger.error("Failed to create blog %s: %s", payload.id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to create blog", details=str(e))

    async def get_blog(
        self, collection: AsyncIOMotorCollection, blog_id: str
    ) -> BlogResponse:
        """
        Raises:
            NotFoundError: no document with this `_id` (or malformed id).
            DatabaseError: the query failed.
        """
        oid = parse_object_id(blog_id)
        try:
            doc = await collection.find_one({"_id": oid})
        except Exception as e:
            logger.error("Failed to fetch blog %s: %s", blog_id, str(e))
            raise DatabaseError(message="Failed to fetch blog details", details=str(e))

        if doc is None:
            raise NotFoundError(resource="Blog", resource_id=blog_id)
        return BlogResponse.model_validate(doc)

    async def update_blog(
        self, collection: AsyncIOMotorCollection, blog_id: str, payload: BlogUpdate
    ) -> MessageResponse:
        """
        Apply a partial update. Only fields that are present and non-null in
        the request body are written; everything else keeps its stored value.

        Raises:
            ValidationError: the body contains no updatable field.
            NotFoundError: no document with this `_id`.
            DatabaseError: the update failed.
        """
        oid = parse_object_id(blog_id)
        # Null filtering is top-level only; the blog body is written as sent
        update_fields = {
            key: value
            for key, value in payload.model_dump(by_alias=True).items()
            if value is not None
        }
        if not update_fields:
            raise ValidationError(message="No fields provided to update")

        try:
            result = await collection.update_one({"_id": oid}, {"$set": update_fields})
        except Exception as e:
            logger.error("Failed to update blog %s: %s", blog_id, str(e))
            raise DatabaseError(message="Failed to update blog", details=str(e))

        if result.matched_count == 0:
            raise NotFoundError(resource="Blog", resource_id=blog_id)

        logger.info("Blog %s updated: %s", blog_id, sorted(update_fields))
        return MessageResponse(message="Blog updated successfully")

    async def delete_blog(
        self, collection: AsyncIOMotorCollection, blog_id: str
    ) -> MessageResponse:
        """
        Raises:
            NotFoundError: nothing was deleted.
            DatabaseError: the delete failed.
        """
        oid = parse_object_id(blog_id)
        try:
            result = await collection.delete_one({"_id": oid})
        except Exception as e:
            logger.error("Failed to delete blog %s: %s", blog_id, str(e))
            raise DatabaseError(message="Failed to delete blog", details=str(e))

        if result.deleted_count == 0:
            raise NotFoundError(resource="Blog", resource_id=blog_id)

        logger.info("Blog %s deleted", blog_id)
        return MessageResponse(message="Blog deleted successfully")

    async def list_author_blogs(
        self, collection: AsyncIOMotorCollection, email: str
    ) -> List[BlogResponse]:
        """Blogs whose authorEmail equals `email`, newest first."""
        if _is_blank(email):
            raise ValidationError(message="Email is required", field="email")

        try:
            cursor = collection.find({AUTHOR_EMAIL: email.strip()}).sort(
                [(CREATED_AT, -1), ("_id", -1)]
            )
            docs = await cursor.to_list(length=None)
        except Exception as e:
            logger.error("Failed to fetch blogs for author: %s", str(e))
            raise DatabaseError(message="Failed to fetch user blogs", details=str(e))

        return [BlogResponse.model_validate(doc) for doc in docs]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


blog_service = BlogService()
