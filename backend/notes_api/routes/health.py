"""
Notes API — Health Check Route
===============================

What:  Health check endpoint for monitoring and container health checks.
How:   Reports whether the store finished loading, how many notes it holds,
       which file it mirrors to, and process uptime.

Status levels:
    - healthy:   store loaded from disk (or first run with no file)
    - degraded:  startup load failed; the service runs on an empty store
                 and the next mutation will overwrite the unreadable file
"""

import logging
import time

from fastapi import APIRouter, Depends

from notes_api import __version__
from notes_api.schemas.note import HealthResponse
from notes_api.services.note_store import NoteStore, get_note_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: NoteStore = Depends(get_note_store)) -> HealthResponse:
    data_file = str(store.data_file) if store.data_file is not None else ""
    return HealthResponse(
        status="healthy" if store.loaded else "degraded",
        version=__version__,
        store="loaded" if store.loaded else "not_loaded",
        note_count=store.count,
        data_file=data_file,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
