"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `notes` table: integer id, title, content, creation
       time, optional saved summary and optional owner.

Rollback: downgrade() drops the table (all notes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column(
            "id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Database-assigned identifier, immutable after creation",
        ),
        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            comment="User-editable title, never blank",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="User-editable body, input to summarization",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        # Written only by the save-summary operation
        sa.Column(
            "summary",
            sa.Text(),
            nullable=True,
            comment="AI-generated summary accepted by the user",
        ),
        sa.Column(
            "owner",
            sa.String(255),
            nullable=True,
            comment="Identifier of the creating user (no access control)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Every listing is ORDER BY created_at DESC
    op.create_index(
        "idx_notes_created_at",
        "notes",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
