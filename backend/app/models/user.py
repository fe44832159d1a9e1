"""
Markpad Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table, the owners of notes and bookmarks.
Who:   Read by the identity resolver (app/security.py) after a bearer token
       has been verified; referenced by every record's `user_id`.

Users are provisioned out of band. This service never creates them and never
stores credentials; it only resolves a token's subject to an existing row.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """An account that owns records."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    display_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
