# Routes package init
"""
Notes API — Routes Package
===========================

Route Inventory:
    - notes.py:   GET    /notes            (list all notes)
                  POST   /notes            (create a note)
                  GET    /notes/{id}       (get one note)
                  PUT    /notes/{id}       (update a note)
                  DELETE /notes/{id}       (delete a note)
    - docs.py:    GET    /docs             (static endpoint catalog)
    - health.py:  GET    /health           (service health check)

Routes are thin: parse the request, call NoteStore, return the result.
Errors are raised as exceptions and formatted by the handlers in main.py.
"""
