"""
Notes API — Notes Route Handlers
=================================

What:  CRUD endpoints for notes.
How:   Parses the id path segment, delegates to NoteStore, returns JSON.

Status Codes:
    GET    /notes        200
    POST   /notes        201 | 400 bad body
    GET    /notes/{id}   200 | 400 bad id | 404
    PUT    /notes/{id}   200 | 400 bad id or body | 404
    DELETE /notes/{id}   200 | 400 bad id | 404

The id segment is declared as a plain string and parsed here, so a
non-numeric id produces this service's 400 body instead of FastAPI's 422.
"""

import logging
import re
from typing import List

from fastapi import APIRouter, Depends, status

from notes_api.exceptions import ValidationError
from notes_api.schemas.note import (
    ErrorResponse,
    MessageResponse,
    Note,
    NotePayload,
)
from notes_api.services.note_store import NoteStore, get_note_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# Ids are signed 64-bit integers
MIN_NOTE_ID = -(2 ** 63)
MAX_NOTE_ID = 2 ** 63 - 1


def parse_note_id(raw: str) -> int:
    """
    Convert the {id} path segment to an integer.

    Accepts an optional sign followed by ASCII digits, within the signed
    64-bit range. Whitespace, underscores, decimals, out-of-range values and
    anything else are rejected.

    Raises:
        ValidationError: The segment is not a 64-bit integer.
    """
    # 2**63 has 19 digits; longer strings are out of range before conversion
    if _ID_PATTERN.fullmatch(raw) and len(raw.lstrip("+-").lstrip("0")) <= 19:
        note_id = int(raw)
        if MIN_NOTE_ID <= note_id <= MAX_NOTE_ID:
            return note_id
    raise ValidationError(message="Invalid ID", field="id", context={"value": raw})


@router.get(
    "/notes",
    response_model=List[Note],
    summary="List all notes",
)
async def list_notes(store: NoteStore = Depends(get_note_store)) -> List[Note]:
    return await store.list_all()


@router.post(
    "/notes",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid body", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    payload: NotePayload,
    store: NoteStore = Depends(get_note_store),
) -> Note:
    """Any `id` in the body is ignored; the store assigns the next one."""
    return await store.create(title=payload.title, content=payload.content)


@router.get(
    "/notes/{note_id}",
    response_model=Note,
    responses={
        400: {"description": "Invalid ID", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get a note by ID",
)
async def get_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
) -> Note:
    return await store.get_by_id(parse_note_id(note_id))


@router.put(
    "/notes/{note_id}",
    response_model=Note,
    responses={
        400: {"description": "Invalid ID or body", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Update a note by ID",
)
async def update_note(
    note_id: str,
    payload: NotePayload,
    store: NoteStore = Depends(get_note_store),
) -> Note:
    """Overwrites title and content. The id never changes."""
    return await store.update(
        parse_note_id(note_id),
        title=payload.title,
        content=payload.content,
    )


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid ID", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Delete a note by ID",
)
async def delete_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
) -> MessageResponse:
    await store.delete(parse_note_id(note_id))
    return MessageResponse(message="Note deleted")
