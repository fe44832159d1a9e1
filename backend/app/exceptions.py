"""
Markpad Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services and the identity resolver; caught by global handlers.

Exception Hierarchy:
    MarkpadError (base)
    ├── ValidationError            → 400 Bad Request
    │   └── RecordValidationError  → 400 Bad Request (all field errors joined)
    ├── InvalidIdError             → 400 Bad Request
    ├── AuthenticationError        → 401 Unauthorized
    ├── NotFoundError              → 404 Not Found
    └── DatabaseError              → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class MarkpadError(Exception):
    """
    Base exception for all Markpad application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MarkpadError):
    """
    Raised when client input fails validation.

    What:    A required field is missing or blank, or a URL is malformed.
    When:    Before anything touches storage.
    HTTP:    400 Bad Request
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


class RecordValidationError(ValidationError):
    """
    Raised when a record fails its schema-level checks (length limits, formats).

    Unlike ValidationError, which stops at the first problem, this carries
    every field message so the client can fix them all at once.

    Example response:
        {"error": "Title cannot exceed 200 characters, Description cannot exceed 500 characters"}
    """

    def __init__(self, errors: List[str], context: Optional[Dict[str, Any]] = None):
        self.errors = list(errors)
        super().__init__(message=", ".join(self.errors), context=context)


class InvalidIdError(MarkpadError):
    """
    Raised when a path identifier is not a syntactically valid record key.

    HTTP:    400 Bad Request

    Only the *format* is judged here. A well-formed id that matches nothing
    (or matches another user's record) is a NotFoundError instead.
    """

    def __init__(self, resource: str = "record", raw_id: Optional[str] = None):
        ctx: Dict[str, Any] = {"resource": resource}
        if raw_id is not None:
            ctx["raw_id"] = raw_id
        super().__init__(message=f"Invalid {resource} ID", context=ctx)
        self.resource = resource


class AuthenticationError(MarkpadError):
    """
    Raised by the identity resolver when a bearer token is missing or invalid.

    HTTP:    401 Unauthorized
    Never retried; the message is surfaced verbatim.
    """

    def __init__(
        self,
        message: str = "Invalid token. Please authenticate.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MarkpadError):
    """
    Raised when no record matches (id, owner).

    HTTP:    404 Not Found

    Records owned by other users raise this too, so their existence is
    never revealed.
    """

    def __init__(
        self,
        resource: str = "Record",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(MarkpadError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
