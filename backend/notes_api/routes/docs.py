"""
Notes API — Static Docs Route
==============================

What:  GET /docs returns a hand-written catalog of the note endpoints.
Why:   A short, stable description for clients; the generated OpenAPI UI
       lives at /swagger and /redoc.
"""

from fastapi import APIRouter

from notes_api import __version__
from notes_api.schemas.note import DocsResponse, EndpointDoc

router = APIRouter(tags=["Docs"])

ENDPOINTS = [
    EndpointDoc(method="GET", path="/notes", description="Get all notes"),
    EndpointDoc(method="POST", path="/notes", description="Create a new note"),
    EndpointDoc(method="GET", path="/notes/{id}", description="Get note by ID"),
    EndpointDoc(method="PUT", path="/notes/{id}", description="Update note by ID"),
    EndpointDoc(method="DELETE", path="/notes/{id}", description="Delete note by ID"),
]


@router.get(
    "/docs",
    response_model=DocsResponse,
    summary="Endpoint catalog",
)
async def docs() -> DocsResponse:
    return DocsResponse(
        title="Notes API",
        description="Simple REST API for managing notes (FastAPI)",
        version=__version__,
        endpoints=ENDPOINTS,
    )
