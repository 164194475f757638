"""
QuillNotes Backend - Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database / completion API.

Service Inventory:
    - NoteService: note validation and CRUD against the database
    - Summarizer (abstract): contract for summary providers
    - OpenAISummaryService: chat-completion implementation of Summarizer

Routes stay thin: they parse the request, call one service method and shape
the response. Services can be exercised in tests without HTTP.
"""
