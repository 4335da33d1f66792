"""
Notes API — Note Store
=======================

What:  The authoritative in-memory collection of notes plus the id counter.
How:   A list of Note records in insertion order, guarded by one asyncio.Lock.
       Every operation, reads included, runs under the lock. Mutations are
       mirrored to disk through JsonFilePersistence before the lock is
       released, so the file always reflects a complete mutation.
Who:   Created by create_app(), attached to app.state, injected into route
       handlers through get_note_store().

Request Flow (PUT /notes/{id}):
    handler ──▶ acquire lock ──▶ find note ──▶ overwrite title/content
                                                      │
    response ◀── release lock ◀── save whole file ◀───┘

Persistence Failure Policy:
    A failed save is logged and otherwise ignored. The mutation stays in
    memory and the caller gets its normal result; the next successful save
    brings the file back in line.

Id Counter:
    next_id starts at 1, and after load() at max(existing ids, 0) + 1.
    It only ever increases; ids of deleted notes are not reused.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import Request

from notes_api.exceptions import NotFoundError, PersistenceError
from notes_api.schemas.note import Note
from notes_api.services.persistence import JsonFilePersistence

logger = logging.getLogger(__name__)


class NoteStore:
    """
    In-memory note collection with a single process-wide lock.

    Responsibilities:
        - load(): replace the collection from the persistence adapter
        - list_all() / get_by_id(): snapshot reads
        - create() / update() / delete(): mutations, each followed by a save

    Lookups are linear scans; the collection is expected to stay small.
    """

    def __init__(self, persistence: Optional[JsonFilePersistence] = None):
        """
        Args:
            persistence: Disk mirror. None keeps the store purely in memory.
        """
        self._persistence = persistence
        self._notes: List[Note] = []
        self._next_id = 1
        self._lock = asyncio.Lock()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def count(self) -> int:
        return len(self._notes)

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def data_file(self) -> Optional[Path]:
        return self._persistence.path if self._persistence is not None else None

    # ── Startup ───────────────────────────────────────────────────────────

    async def load(self) -> bool:
        """
        Populate the store from the persistence adapter.

        On PersistenceError the error is logged and the store keeps whatever
        state it had before (empty at startup).

        Returns:
            True if the collection was replaced, False if loading failed.
        """
        if self._persistence is None:
            self._loaded = True
            return True

        async with self._lock:
            try:
                notes = await self._persistence.load()
            except PersistenceError as e:
                logger.error(
                    "Could not load notes from file: %s | Context: %s",
                    e.message,
                    e.context,
                )
                return False

            self._notes = notes
            self._next_id = max([0] + [note.id for note in notes]) + 1
            self._loaded = True

        logger.info(
            "Loaded %d notes from %s (next id %d)",
            len(notes),
            self._persistence.path,
            self._next_id,
        )
        return True

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_all(self) -> List[Note]:
        """Return copies of every note, in insertion order."""
        async with self._lock:
            return [note.model_copy() for note in self._notes]

    async def get_by_id(self, note_id: int) -> Note:
        """
        Raises:
            NotFoundError: No note has this id.
        """
        async with self._lock:
            return self._find(note_id).model_copy()

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(self, title: str, content: str) -> Note:
        """Assign the next id, append the note and persist."""
        async with self._lock:
            note = Note(id=self._next_id, title=title, content=content)
            self._next_id += 1
            self._notes.append(note)
            await self._persist()
            logger.info("Created note %d", note.id)
            return note.model_copy()

    async def update(self, note_id: int, title: str, content: str) -> Note:
        """
        Overwrite title and content of an existing note; the id is untouched.

        Raises:
            NotFoundError: No note has this id. Nothing is written.
        """
        async with self._lock:
            note = self._find(note_id)
            note.title = title
            note.content = content
            await self._persist()
            logger.info("Updated note %d", note.id)
            return note.model_copy()

    async def delete(self, note_id: int) -> None:
        """
        Remove the note with this id.

        Raises:
            NotFoundError: No note has this id. Nothing is written.
        """
        async with self._lock:
            del self._notes[self._index_of(note_id)]
            await self._persist()
            logger.info("Deleted note %d", note_id)

    # ── Internals (caller holds the lock) ─────────────────────────────────

    def _index_of(self, note_id: int) -> int:
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                return index
        raise NotFoundError(resource_id=note_id)

    def _find(self, note_id: int) -> Note:
        return self._notes[self._index_of(note_id)]

    async def _persist(self) -> None:
        if self._persistence is None:
            return
        try:
            await self._persistence.save(self._notes)
        except PersistenceError as e:
            logger.error(
                "Failed to save notes: %s | Context: %s",
                e.message,
                e.context,
            )


def get_note_store(request: Request) -> NoteStore:
    """
    FastAPI dependency returning the store owned by the running app.

    Usage:
        @router.get("/notes")
        async def list_notes(store: NoteStore = Depends(get_note_store)):
            ...
    """
    return request.app.state.note_store
