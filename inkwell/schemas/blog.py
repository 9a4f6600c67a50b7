"""
Inkwell Backend - Pydantic Request/Response Schemas
===================================================

What:  The API contract for blog documents, reactions and search.
How:   Python attributes are snake_case; the JSON wire format (and the MongoDB
       documents) use the camelCase keys the frontend already sends, exposed
       through field aliases. `populate_by_name` lets tests and services build
       models with either spelling.

Request bodies declare required blog fields as Optional on purpose: the service
reports every missing field in one 400 response instead of FastAPI's per-field
422.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BlogCreate(BaseModel):
    """
    Body of POST /blogs.

    Required by the service: id, title, blog, category, authorName.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Application-assigned blog id")
    title: Optional[str] = None
    blog: Optional[Dict[str, Any]] = Field(
        default=None, description="Block-editor output, stored exactly as sent"
    )
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    author_name: Optional[str] = Field(default=None, alias="authorName")
    author_email: Optional[str] = Field(default=None, alias="authorEmail")


class BlogUpdate(BaseModel):
    """Body of PUT /blogs/{id}. Only non-null fields are written."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    blog: Optional[Dict[str, Any]] = Field(
        default=None, description="Block-editor output, stored exactly as sent"
    )
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    author_name: Optional[str] = Field(default=None, alias="authorName")
    author_email: Optional[str] = Field(default=None, alias="authorEmail")


class FetchRequest(BaseModel):
    """
    Body of POST /blogs/fetch.

    `categories` is typed loosely so a malformed value reaches the service and
    gets the "Invalid categories format" message.
    """

    categories: Any = None
    random: Optional[int] = None


class EmailRequest(BaseModel):
    """Body of POST /blogs/my-blogs and PATCH /blogs/react/{id}."""

    email: Optional[str] = None


class ReactStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    blog_id: Optional[str] = Field(default=None, alias="blogId")
    email: Optional[str] = None


class SearchRequest(BaseModel):
    query: Any = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BlogResponse(BaseModel):
    """
    A blog document as returned by the API.

    Listing routes project documents down to a subset of fields, so every
    field is optional and routes serialize with `response_model_exclude_unset`
    to avoid padding projected documents with nulls. Unknown stored keys are
    passed through unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    mongo_id: str = Field(alias="_id", description="Store-native id (ObjectId hex)")
    id: Optional[str] = None
    title: Optional[str] = None
    blog: Optional[Dict[str, Any]] = Field(
        default=None, description="Block-editor output as stored"
    )
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    author_name: Optional[str] = Field(default=None, alias="authorName")
    author_email: Optional[str] = Field(default=None, alias="authorEmail")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    react_count: Optional[int] = Field(default=None, alias="reactCount")
    reacted_users: Optional[List[str]] = Field(default=None, alias="reactedUsers")
    description: Optional[str] = Field(
        default=None,
        description="First paragraph, else quote, else header text (category listing only)",
    )

    @field_validator("mongo_id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v


class BlogCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Blog created successfully"
    blog_id: str = Field(alias="blogId")
    custom_id: str = Field(alias="customId")


class MessageResponse(BaseModel):
    message: str


class CategoryCount(BaseModel):
    category: Optional[str]
    count: int


class ReactionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    reacted: bool
    react_count: int = Field(alias="reactCount")


class ReactionStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reacted: bool
    react_count: int = Field(alias="reactCount")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"error": "Failed to create blog", "details": "connection refused", "request_id": "a1b2c3d4"}
    """

    error: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
