"""
Markpad Backend — Note Service
================================

What:  Create/update rules for notes on top of OwnedRecordService.
Who:   Called by the /api/notes route handlers.

Create:  title and content must be non-blank strings; tags are normalized;
         isFavorite defaults to false.
Update:  only fields present in the body are applied; a present title or
         content must still be non-blank; present tags are re-normalized.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.note import Note
from app.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from app.services.record_service import OwnedRecordService
from app.services.tags import normalize_tags

logger = logging.getLogger(__name__)


class NoteService(OwnedRecordService):
    model = Note
    resource = "Note"

    async def create(self, db: AsyncSession, owner_id: UUID, payload: NoteCreate) -> NoteResponse:
        title = self.require_text(payload.title, "Title is required", "title")
        content = self.require_text(payload.content, "Content is required", "content")

        now = datetime.now(timezone.utc)
        note = Note(
            id=uuid.uuid4(),
            user_id=owner_id,
            title=title,
            content=content,
            is_favorite=bool(payload.is_favorite),
            created_at=now,
            updated_at=now,
        )
        note.tags = normalize_tags(payload.tags)

        await self._save(db, note)
        logger.info("Note created: %s (%d tags)", note.id, len(note.tag_rows))
        return self.to_response(note)

    async def update(
        self,
        db: AsyncSession,
        owner_id: UUID,
        raw_id: str,
        payload: NoteUpdate,
    ) -> NoteResponse:
        changes = self._collect_changes(payload)
        note = await self._get_owned(db, owner_id, raw_id)

        for name, value in changes.items():
            setattr(note, name, value)
        note.updated_at = datetime.now(timezone.utc)

        await self._save(db, note)
        logger.info("Note updated: %s (fields=%s)", note.id, sorted(changes))
        return self.to_response(note)

    def _collect_changes(self, payload: NoteUpdate) -> Dict[str, Any]:
        present = payload.model_fields_set
        changes: Dict[str, Any] = {}
        if "title" in present:
            changes["title"] = self.require_text(payload.title, "Title is required", "title")
        if "content" in present:
            changes["content"] = self.require_text(payload.content, "Content is required", "content")
        if "tags" in present:
            changes["tags"] = normalize_tags(payload.tags)
        if "is_favorite" in present and payload.is_favorite is not None:
            changes["is_favorite"] = payload.is_favorite
        return changes

    def to_response(self, note: Note) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            title=note.title,
            content=note.content,
            tags=note.tags,
            is_favorite=note.is_favorite,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


note_service = NoteService()
