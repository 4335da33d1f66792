"""
Notes API — Custom Exception Hierarchy
=======================================

What:  Defines application-specific exceptions for the note service.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by the store, the persistence adapter and route helpers.

Exception Hierarchy:
    NotesAPIError (base)           → 500 Internal Server Error
    ├── ValidationError            → 400 Bad Request (client can fix)
    ├── NotFoundError              → 404 Not Found
    └── PersistenceError           → logged, never returned to a client

Request bodies that fail schema validation raise FastAPI's own
RequestValidationError; main.py maps it to 400 as well.
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

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


class ValidationError(NotesAPIError):
    """
    Raised when client input fails validation.

    When:    A note id path segment is not an integer.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "Invalid ID",
            "code": "validation_error",
            "details": {"field": "id", "value": "abc"}
        }
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


class NotFoundError(NotesAPIError):
    """
    Raised when a requested note does not exist.

    When:    GET/PUT/DELETE /notes/{id} with an id the store does not hold.
    HTTP:    404 Not Found

    This is an expected outcome, so handlers return it without logging.
    """

    def __init__(
        self,
        message: str = "Note not found",
        resource_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class PersistenceError(NotesAPIError):
    """
    Raised when the JSON mirror cannot be read or written.

    When:    Malformed JSON on load, permission denied, disk full, I/O error.

    Recovery:
        - Load failure: the store keeps its previous (empty) state
        - Save failure: the in-memory mutation stands and the request succeeds
        Both are logged at ERROR with the path and OS error.
    """

    def __init__(
        self,
        message: str = "Note persistence operation failed",
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message=message, context=ctx)
        self.path = path
