"""
QuillNotes - Package Initializer
==================================

Personal notes with AI summaries.

    ┌─────────────────────────────────────┐
    │   client/  (controller + stores)    │  ← dialog state machine, Ok/Err results
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, summarization
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
