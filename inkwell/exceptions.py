"""
Inkwell Backend - Custom Exception Hierarchy
============================================

What:  Application exceptions mapped to HTTP status codes by the handlers
       registered in main.py.
How:   Each exception carries a user-facing `message` and a `context` dict.
       Handlers render `message` as the `error` field of the JSON body and the
       relevant part of `context` as `details`.
Who:   Raised by services and middleware; caught by the global handlers.

Exception Hierarchy:
    InkwellError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class InkwellError(Exception):
    """
    Base exception for all Inkwell application errors.

    Attributes:
        message:  Human-readable error description, returned as `error`
        context:  Additional information for logs and the `details` field
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(InkwellError):
    """
    Raised when client input fails a business rule.

    Pydantic schema violations are converted to 400 by their own handler; this
    exception covers the checks the services make themselves (required fields,
    duplicate ids, empty updates, blank search queries).
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(InkwellError):
    """
    Raised when a requested blog does not exist.

    Malformed ObjectIds raise this too: an id that cannot be parsed cannot
    name a stored document.
    """

    def __init__(
        self,
        resource: str = "Blog",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource.lower()
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(InkwellError):
    """
    Raised when a MongoDB operation fails.

    `message` names the failed operation ("Failed to create blog"); `details`
    carries the underlying driver message so API clients can see what broke.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if details:
            ctx["details"] = details
        super().__init__(message=message, context=ctx)
        self.details = details


class RateLimitExceededError(InkwellError):
    """Raised when a client exceeds the per-IP request rate limit."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
