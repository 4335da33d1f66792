"""
Notes API — JSON File Persistence Adapter
==========================================

What:  Mirrors the note collection to and from a single JSON file.
How:   `load()` reads and validates the whole file; `save()` serializes the
       complete collection and overwrites the file. Async file I/O via
       aiofiles so disk latency does not block the event loop.
Who:   Owned by NoteStore, which calls load() at startup and save() after
       every create/update/delete.

File Layout:
    [
      {
        "id": 1,
        "title": "A",
        "content": "B"
      }
    ]

Write Modes:
    atomic_write=True   write <file>.tmp, then os.replace() it over <file>
    atomic_write=False  truncate <file> and write in place; a crash mid-write
                        can leave a partial file
    Neither mode is append-only or journaled: every save is a full rewrite.
"""

import json
import logging
from pathlib import Path
from typing import List, Sequence

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notes_api.exceptions import PersistenceError
from notes_api.schemas.note import Note

logger = logging.getLogger(__name__)

_note_list = TypeAdapter(List[Note])


class JsonFilePersistence:
    """
    Reads and writes the notes JSON file.

    The adapter holds no note state of its own; it only knows the path and
    the write mode. Callers serialize access (NoteStore holds its lock
    across save()).
    """

    def __init__(self, path: str, atomic_write: bool = True):
        self.path = Path(path)
        self.atomic_write = atomic_write

    @property
    def _tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    async def load(self) -> List[Note]:
        """
        Read the whole file and return its notes in file order.

        Returns:
            The stored notes, or an empty list when the file does not exist
            (first run).

        Raises:
            PersistenceError: The file is unreadable, is not a JSON array of
                notes, or contains duplicate ids.
        """
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            logger.info("No data file at %s; starting with an empty store", self.path)
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(
                message="Could not read notes file",
                path=str(self.path),
                context={"os_error": str(e)},
            )

        try:
            notes = _note_list.validate_json(raw)
        except PydanticValidationError as e:
            raise PersistenceError(
                message="Notes file is malformed",
                path=str(self.path),
                context={"errors": e.error_count(), "first_error": e.errors()[0]["msg"]},
            )

        seen = set()
        for note in notes:
            if note.id in seen:
                raise PersistenceError(
                    message="Notes file contains duplicate ids",
                    path=str(self.path),
                    context={"duplicate_id": note.id},
                )
            seen.add(note.id)

        return notes

    async def save(self, notes: Sequence[Note]) -> None:
        """
        Overwrite the file with the complete collection.

        Raises:
            PersistenceError: Directory creation, write or rename failed.
        """
        payload = json.dumps(
            [note.model_dump() for note in notes],
            indent=2,
            ensure_ascii=False,
        ) + "\n"

        target = self._tmp_path if self.atomic_write else self.path
        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(target, "w", encoding="utf-8") as f:
                await f.write(payload)
            if self.atomic_write:
                await aiofiles.os.replace(target, self.path)
        except OSError as e:
            if self.atomic_write:
                await self._cleanup_tmp()
            raise PersistenceError(
                message="Could not write notes file",
                path=str(self.path),
                context={"os_error": str(e)},
            )

        logger.debug("Wrote %d notes to %s", len(notes), self.path)

    async def _cleanup_tmp(self) -> None:
        """Best-effort removal of a half-written temp file."""
        try:
            await aiofiles.os.remove(self._tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to clean up temp file %s: %s", self._tmp_path, str(e))
