"""
Markpad Backend — Bookmark Request/Response Schemas
=====================================================

Same conventions as app/schemas/note.py: loose inputs validated in the
service, camelCase on the wire.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class BookmarkCreate(CamelModel):
    """Body of POST /api/bookmarks."""
    url: Optional[str] = Field(default=None, description="Required, http:// or https://")
    title: Optional[str] = Field(
        default=None,
        description="Optional; fetched from the page (or the URL itself) when absent",
    )
    description: Optional[str] = Field(default=None, description="Optional, max 500 characters")
    tags: Any = Field(default=None, description="List of tags or a comma/space/# separated string")
    is_favorite: Optional[bool] = None


class BookmarkUpdate(CamelModel):
    """Body of PUT /api/bookmarks/{id}; only present fields are applied."""
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Any = None
    is_favorite: Optional[bool] = None


class BookmarkResponse(CamelModel):
    id: uuid.UUID
    url: str
    title: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    created_at: datetime
    updated_at: datetime
