"""
QuillNotes Backend - Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - Integer primary key assigned by the database (autoincrement)
    - title / content: NOT NULL; blank values are rejected before insert
    - summary: nullable, written only by the save-summary operation
    - owner: nullable creator identifier, stored but never enforced
    - created_at: UTC with timezone, set once at insert

    Index on created_at DESC serves the only listing order the app uses.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from quillnotes.database import Base


class Note(Base):
    """
    A user-authored title/content pair with an optional AI summary.

    Lifecycle:
        1. Created by user submission (summary is NULL)
        2. Updated by edit ({title, content}) or summary save ({summary})
        3. Deleted explicitly

    The summary is not cleared when content changes; a stale summary is
    accepted behaviour.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Database-assigned identifier, immutable after creation",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User-editable title, never blank",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="User-editable body, input to summarization",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    summary: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="AI-generated summary accepted by the user",
    )

    owner: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="Identifier of the creating user (no access control)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
