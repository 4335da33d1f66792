"""
Notes API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the note record and the API contract.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI schema. The persistence adapter
       uses `Note` to validate the JSON file on load.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Domain Record
# ══════════════════════════════════════════════════════════════════════════


class Note(BaseModel):
    """
    What:  A single note as held by the store, written to disk and returned
           by every note endpoint.

    Invariant: `id` is assigned by NoteStore and never changes afterwards.
    """
    id: int = Field(description="Store-assigned identifier, unique and immutable")
    title: str = Field(description="Note title (free text)")
    content: str = Field(description="Note body (free text)")


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class NotePayload(BaseModel):
    """
    What:  Body of POST /notes and PUT /notes/{id}.

    Missing or null title/content become empty strings. Other values must
    be JSON strings; numbers or objects are rejected with 400. A client-sent
    `id` is accepted for shape compatibility with `Note` and then ignored.
    """
    id: Optional[StrictInt] = Field(
        default=None,
        description="Ignored; ids are assigned by the server",
    )
    title: StrictStr = Field(default="", description="Note title")
    content: StrictStr = Field(default="", description="Note body")

    @field_validator("title", "content", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        """JSON null leaves the field at its empty default."""
        return "" if v is None else v


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Confirmation returned by DELETE /notes/{id}."""
    message: str = Field(description="Human-readable confirmation")


class EndpointDoc(BaseModel):
    method: str
    path: str
    description: str


class DocsResponse(BaseModel):
    """
    What:  Hand-written endpoint catalog returned by GET /docs.
    Why static: The catalog is a fixed description, not OpenAPI introspection.
    """
    title: str
    description: str
    version: str
    endpoints: List[EndpointDoc]


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Human-readable description (always present)
        code: Machine-readable error code (e.g., "validation_error", "not_found")
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "Note not found",
            "code": "not_found",
            "request_id": "1f3a9c2e"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and container health checks.
    """
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    store: str = Field(description="Store state: loaded, not_loaded")
    note_count: int = Field(description="Number of notes currently held in memory")
    data_file: str = Field(description="Path of the JSON mirror")
    uptime_seconds: float = Field(description="Seconds since service started")
