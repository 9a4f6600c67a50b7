"""
Inkwell Backend - Reaction Service
==================================

What:  Like/unlike toggling and reaction status for a blog.
How:   A toggle is two guarded single-document updates:

           1. {_id, reactedUsers: {$ne: email}} → $addToSet email, $inc +1
           2. {_id, reactedUsers: email}        → $pull email,     $inc -1

       Exactly one guard can match a given document state, and MongoDB applies
       each update atomically, so `reactCount` always moves together with the
       membership of `reactedUsers`. No application lock is involved.
Who:   Called by routes/reactions.py.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from inkwell.exceptions import DatabaseError, InkwellError, NotFoundError, ValidationError
from inkwell.schemas.blog import ReactionResponse, ReactionStatus
from inkwell.services.documents import REACT_COUNT, REACTED_USERS, parse_object_id

logger = logging.getLogger(__name__)

# Both guards can miss when another request flips the same email in between
MAX_TOGGLE_ATTEMPTS = 3

COUNT_PROJECTION = {REACT_COUNT: 1}


class ReactionService:
    """Per-document, per-email reaction state."""

    async def toggle(
        self, collection: AsyncIOMotorCollection, blog_id: str, email: Optional[str]
    ) -> ReactionResponse:
        """
        Flip `email`'s membership in the blog's reacted-users set.

        Returns:
            ReactionResponse with the new membership and count.

        Raises:
            ValidationError: email missing or blank.
            NotFoundError: no blog with this id.
            DatabaseError: the update failed or kept racing.
        """
        if email is None or not email.strip():
            raise ValidationError(message="Email is required", field="email")
        email = email.strip()
        oid = parse_object_id(blog_id)

        try:
            for attempt in range(MAX_TOGGLE_ATTEMPTS):
                doc = await collection.find_one_and_update(
                    {"_id": oid, REACTED_USERS: {"$ne": email}},
                    {"$addToSet": {REACTED_USERS: email}, "$inc": {REACT_COUNT: 1}},
                    projection=COUNT_PROJECTION,
                    return_document=ReturnDocument.AFTER,
                )
                if doc is not None:
                    logger.info("Blog %s reaction added", blog_id)
                    return ReactionResponse(
                        message="Reaction added",
                        reacted=True,
                        react_count=doc.get(REACT_COUNT, 0),
                    )

                doc = await collection.find_one_and_update(
                    {"_id": oid, REACTED_USERS: email},
                    {"$pull": {REACTED_USERS: email}, "$inc": {REACT_COUNT: -1}},
                    projection=COUNT_PROJECTION,
                    return_document=ReturnDocument.AFTER,
                )
                if doc is not None:
                    logger.info("Blog %s reaction removed", blog_id)
                    return ReactionResponse(
                        message="Reaction removed",
                        reacted=False,
                        react_count=doc.get(REACT_COUNT, 0),
                    )

                if await collection.count_documents({"_id": oid}, limit=1) == 0:
                    raise NotFoundError(resource="Blog", resource_id=blog_id)
                logger.warning(
                    "Reaction toggle on blog %s raced (attempt %d)", blog_id, attempt + 1
                )

        except InkwellError:
            raise
        except Exception as e:
            logger.error("Failed to toggle reaction on blog %s: %s", blog_id, str(e))
            raise DatabaseError(message="Failed to update reaction", details=str(e))

        raise DatabaseError(
            message="Failed to update reaction",
            details="Concurrent reaction updates did not settle",
        )

    async def status(
        self,
        collection: AsyncIOMotorCollection,
        blog_id: Optional[str],
        email: Optional[str] = None,
    ) -> ReactionStatus:
        """
        Whether `email` has reacted to the blog, and the current count.

        A missing email is not an error: it reports `reacted=False`.
        """
        if blog_id is None or not blog_id.strip():
            raise ValidationError(message="Blog id is required", field="blogId")
        oid = parse_object_id(blog_id.strip())

        try:
            doc = await collection.find_one(
                {"_id": oid}, projection={REACT_COUNT: 1, REACTED_USERS: 1}
            )
        except Exception as e:
            logger.error("Failed to read reaction status of blog %s: %s", blog_id, str(e))
            raise DatabaseError(message="Failed to fetch reaction status", details=str(e))

        if doc is None:
            raise NotFoundError(resource="Blog", resource_id=blog_id)

        reacted = False
        if email and email.strip():
            reacted = email.strip() in (doc.get(REACTED_USERS) or [])
        return ReactionStatus(reacted=reacted, react_count=doc.get(REACT_COUNT, 0))


reaction_service = ReactionService()
