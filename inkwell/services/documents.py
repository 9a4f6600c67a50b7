"""
Helpers shared by the blog services: id parsing, field names, projections.
"""

from typing import Any, Dict, Iterator, List, Optional

from bson import ObjectId

from inkwell.exceptions import NotFoundError

# Stored document keys
CREATED_AT = "createdAt"
REACT_COUNT = "reactCount"
REACTED_USERS = "reactedUsers"
AUTHOR_NAME = "authorName"
AUTHOR_EMAIL = "authorEmail"

# Card-sized view used by the popular and category listings
SUMMARY_PROJECTION: Dict[str, int] = {
    "_id": 1,
    "id": 1,
    "title": 1,
    "thumbnail": 1,
    "category": 1,
    "tags": 1,
    AUTHOR_NAME: 1,
    CREATED_AT: 1,
    REACT_COUNT: 1,
}


def parse_object_id(blog_id: str) -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    Raises:
        NotFoundError: the string is not a 24-hex-digit ObjectId.
    """
    if not ObjectId.is_valid(blog_id):
        raise NotFoundError(resource="Blog", resource_id=blog_id)
    return ObjectId(blog_id)


def iter_blocks(doc: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """Yield the block dicts of a stored blog body, tolerating missing keys."""
    body = doc.get("blog")
    if not isinstance(body, dict):
        return
    blocks = body.get("blocks")
    if not isinstance(blocks, list):
        return
    for block in blocks:
        if isinstance(block, dict):
            yield block


def block_text(block: Dict[str, Any]) -> Optional[str]:
    data = block.get("data")
    if not isinstance(data, dict):
        return None
    text = data.get("text")
    return text if isinstance(text, str) else None


def searchable_fields(doc: Dict[str, Any]) -> List[str]:
    """Title, category, tags, author and every block's text, blanks dropped."""
    fields: List[Any] = [doc.get("title"), doc.get("category"), doc.get(AUTHOR_NAME)]
    tags = doc.get("tags")
    if isinstance(tags, list):
        fields.extend(tags)
    fields.extend(block_text(block) for block in iter_blocks(doc))
    return [f for f in fields if isinstance(f, str) and f.strip()]
