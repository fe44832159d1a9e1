"""
Markpad Backend — Bookmark SQLAlchemy Models
==============================================

What:  ORM models for the `bookmarks` table and its `bookmark_tags` child table.
Who:   Used by BookmarkService for CRUD operations and by the query builder.

Same ownership, tag and timestamp layout as notes (see app/models/note.py).
Bookmark-specific columns:
    - url: required, must start with http:// or https://
    - title: derived from the page when the client does not send one
    - description: optional, stored as "" when absent, max 500 characters
"""

import re
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
DESCRIPTION_MAX_LENGTH = 500

URL_PATTERN = re.compile(r"^https?://.+")
INVALID_URL_MESSAGE = "Please provide a valid URL (must start with http:// or https://)"


class BookmarkTag(Base):
    """One tag attached to a bookmark; `position` keeps first-seen order."""

    __tablename__ = "bookmark_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bookmark_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_bookmark_tags_name", "name"),
        Index("idx_bookmark_tags_bookmark_id", "bookmark_id"),
    )


class Bookmark(Base):
    """A saved URL owned by a user."""

    __tablename__ = "bookmarks"

    search_fields = ("title", "description", "url")

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

    url: Mapped[str] = mapped_column(Text, nullable=False)

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        default="",
    )

    description: Mapped[str] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=False,
        default="",
    )

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

    tag_rows: Mapped[List[BookmarkTag]] = relationship(
        order_by=BookmarkTag.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_bookmarks_user_created_at", "user_id", created_at.desc()),
    )

    tag_model = BookmarkTag

    @property
    def tags(self) -> List[str]:
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names: List[str]) -> None:
        self.tag_rows = [
            BookmarkTag(name=name, position=position) for position, name in enumerate(names)
        ]

    def validate(self) -> List[str]:
        """Record-level checks; returns every violated rule."""
        errors = []
        if not self.url:
            errors.append("URL is required")
        elif not URL_PATTERN.match(self.url):
            errors.append(INVALID_URL_MESSAGE)
        if self.title and len(self.title) > TITLE_MAX_LENGTH:
            errors.append(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        if self.description and len(self.description) > DESCRIPTION_MAX_LENGTH:
            errors.append(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")
        return errors

    def __repr__(self) -> str:
        return f"<Bookmark(id={self.id}, user_id={self.user_id}, url='{self.url}')>"
