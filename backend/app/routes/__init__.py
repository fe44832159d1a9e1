# Routes package init
"""
Markpad Backend — API Routes Package
======================================

Route Inventory:
    - notes.py:      /api/notes[/{note_id}]          (CRUD, authenticated)
    - bookmarks.py:  /api/bookmarks[/{bookmark_id}]  (CRUD, authenticated)
    - health.py:     GET /health                     (no auth)

Routes are thin: resolve the caller, parse query params, call a service,
set status code and headers. Business rules live in app.services.
"""
