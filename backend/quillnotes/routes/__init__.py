"""
QuillNotes Backend - API Routes Package
=========================================

Route Inventory:
    - notes.py:      GET/POST /api/notes, GET/PATCH/DELETE /api/notes/{id}
    - summarize.py:  POST /summarize
    - health.py:     GET /health, GET /health/credentials

Routes handle HTTP concerns only; business rules live in services.
"""
