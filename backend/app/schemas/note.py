"""
Markpad Backend — Note Request/Response Schemas
=================================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against these and serializes
       responses through them (camelCase on the wire).

Input models are deliberately loose: required-ness and blankness are
checked in NoteService so the client gets "Title is required" rather than a
generic schema error, and `tags` accepts any JSON value because the tag
normalizer turns malformed input into an empty list instead of failing.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class NoteCreate(CamelModel):
    """Body of POST /api/notes."""
    title: Optional[str] = Field(default=None, description="Required, max 200 characters")
    content: Optional[str] = Field(default=None, description="Required")
    tags: Any = Field(default=None, description="List of tags or a comma/space/# separated string")
    is_favorite: Optional[bool] = Field(default=None, description="Defaults to false")


class NoteUpdate(CamelModel):
    """
    Body of PUT /api/notes/{id}.

    Only fields present in the body are applied (see model_fields_set).
    """
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Any = None
    is_favorite: Optional[bool] = None


class NoteResponse(CamelModel):
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last update time (UTC ISO 8601)")
