"""create notes

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-19 09:12:44.102381

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from pgvector.sqlalchemy import Vector

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the notes table with its search indexes."""
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("embedding", Vector(384), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_created_at", "notes", ["created_at"])

    # Must match the expression built in repositories/notes.py. The config is
    # fixed at 'english' (the TEXT_SEARCH_CONFIG default); changing the setting
    # requires a new migration that rebuilds this index.
    op.execute(
        """
        CREATE INDEX ix_notes_fts
        ON notes
        USING gin (to_tsvector('english'::regconfig, title || ' ' || body))
        """
    )

    # Vector search scans only notes that carry an embedding
    op.execute(
        """
        CREATE INDEX ix_notes_has_embedding
        ON notes (created_at)
        WHERE embedding IS NOT NULL
        """
    )


def downgrade() -> None:
    """Drop the notes table and its indexes."""
    op.execute("DROP INDEX IF EXISTS ix_notes_has_embedding")
    op.execute("DROP INDEX IF EXISTS ix_notes_fts")
    op.drop_index("ix_notes_created_at", table_name="notes")
    op.drop_table("notes")
