# Services package init
"""
Notes API — Services Layer
===========================

What:  State and persistence sitting between routes (HTTP) and the disk.

Service Inventory:
    - NoteStore: in-memory note collection, lock, id counter, CRUD
    - JsonFilePersistence: whole-file JSON mirror of the collection

Routes depend on NoteStore only; NoteStore depends on JsonFilePersistence.
"""
