"""Create users, notes, bookmarks and tag tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Initial schema for Markpad.
How:   Portable column types (sa.Uuid, TIMESTAMP WITH TIME ZONE) matching
       app/models; tag tables cascade on delete of their parent record.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _tag_table(table: str, parent_table: str, parent_column: str) -> None:
    op.create_table(
        table,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(parent_column, sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False, comment="Normalized tag text"),
        sa.Column(
            "position",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="First-seen order within the record",
        ),
        sa.ForeignKeyConstraint([parent_column], [f"{parent_table}.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(f"idx_{table}_name", table, ["name"])
    op.create_index(f"idx_{table}_{parent_column}", table, [parent_column])


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Owning user"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Every list query is "this owner's records, newest first"
    op.create_index(
        "idx_notes_user_created_at",
        "notes",
        ["user_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "bookmarks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Owning user"),
        sa.Column("url", sa.Text(), nullable=False, comment="http:// or https:// only"),
        sa.Column("title", sa.String(200), nullable=False, server_default=sa.text("''")),
        sa.Column("description", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_bookmarks_user_created_at",
        "bookmarks",
        ["user_id", sa.text("created_at DESC")],
    )

    _tag_table("note_tags", "notes", "note_id")
    _tag_table("bookmark_tags", "bookmarks", "bookmark_id")


def downgrade() -> None:
    """Drop every Markpad table, children first."""
    op.drop_table("bookmark_tags")
    op.drop_table("note_tags")
    op.drop_index("idx_bookmarks_user_created_at", table_name="bookmarks")
    op.drop_table("bookmarks")
    op.drop_index("idx_notes_user_created_at", table_name="notes")
    op.drop_table("notes")
    op.drop_table("users")
