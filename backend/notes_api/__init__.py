"""
Notes API — Application Package Initializer
============================================

What: Marks the `notes_api` directory as a Python package.
Who:  Imported by uvicorn (`notes_api.main:app`), pytest, and the console script.

Architecture Note:
    The service is a thin layered stack:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       NoteStore (in-memory data)    │  ← Lock, id counter, CRUD
    ├─────────────────────────────────────┤
    │   JsonFilePersistence (disk mirror) │  ← Whole-file JSON rewrite
    └─────────────────────────────────────┘

    Routes never touch the file; the store never touches HTTP.
"""

__version__ = "1.0.0"
