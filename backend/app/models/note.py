"""
Markpad Backend — Note SQLAlchemy Models
==========================================

What:  ORM models for the `notes` table and its `note_tags` child table.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by the query builder for filters.

Table Design Rationale:
    - UUID primary key: non-sequential, so ids cannot be enumerated
    - user_id: every note is owned by exactly one user; all queries filter on it
    - title/content stored trimmed; title capped at 200 characters
    - tags live in `note_tags` (one row per tag, with its position) so that
      "tagged with any of X, Y" is a plain IN subquery on every database
    - created_at/updated_at: UTC with timezone

    Index on (user_id, created_at DESC):
        The list endpoint always filters by owner and sorts newest first.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

TITLE_MAX_LENGTH = 200


class NoteTag(Base):
    """One tag attached to a note; `position` keeps first-seen order."""

    __tablename__ = "note_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    note_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_note_tags_name", "name"),
        Index("idx_note_tags_note_id", "note_id"),
    )


class Note(Base):
    """
    A free-text note owned by a user.

    Lifecycle:
        1. Created on a valid POST (title and content required)
        2. Any field individually mutable on PUT
        3. Removed on DELETE (tag rows go with it)
    """

    __tablename__ = "notes"

    # Columns matched by the free-text `q` filter
    search_fields = ("title", "content")

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    tag_rows: Mapped[List[NoteTag]] = relationship(
        order_by=NoteTag.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_notes_user_created_at", "user_id", created_at.desc()),
    )

    tag_model = NoteTag

    @property
    def tags(self) -> List[str]:
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names: List[str]) -> None:
        self.tag_rows = [
            NoteTag(name=name, position=position) for position, name in enumerate(names)
        ]

    def validate(self) -> List[str]:
        """
        Record-level checks run before every flush.

        Returns every violated rule (empty list when valid) so the caller can
        report them together.
        """
        errors = []
        if not self.title:
            errors.append("Title is required")
        elif len(self.title) > TITLE_MAX_LENGTH:
            errors.append(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        if not self.content:
            errors.append("Content is required")
        return errors

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
