"""
Markpad Backend — Bookmark Service
====================================

What:  Create/update rules for bookmarks on top of OwnedRecordService.
Who:   Called by the /api/bookmarks route handlers.

Create flow:
    ┌───────────┐    ┌─────────────┐    ┌──────────────────┐    ┌─────────┐
    │ url check │───▶│ tags        │───▶│ title given?     │───▶│ persist │
    │ (http(s)) │    │ normalized  │    │ no → fetch page  │    │         │
    └───────────┘    └─────────────┘    │ none → use url   │    └─────────┘
                                        └──────────────────┘

The metadata fetch absorbs its own failures, so a dead or slow site only
costs up to the fetch timeout; the bookmark is still created.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.bookmark import (
    INVALID_URL_MESSAGE,
    TITLE_MAX_LENGTH,
    URL_PATTERN,
    Bookmark,
)
from app.schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from app.services.metadata_service import metadata_fetcher
from app.services.record_service import OwnedRecordService
from app.services.tags import normalize_tags

logger = logging.getLogger(__name__)


class BookmarkService(OwnedRecordService):
    model = Bookmark
    resource = "Bookmark"

    async def create(
        self,
        db: AsyncSession,
        owner_id: UUID,
        payload: BookmarkCreate,
    ) -> BookmarkResponse:
        url = self._validate_url(payload.url)
        tags = normalize_tags(payload.tags)

        title = self.optional_text(payload.title)
        if not title:
            title = await self._derive_title(url)

        now = datetime.now(timezone.utc)
        bookmark = Bookmark(
            id=uuid.uuid4(),
            user_id=owner_id,
            url=url,
            title=title,
            description=self.optional_text(payload.description),
            is_favorite=bool(payload.is_favorite),
            created_at=now,
            updated_at=now,
        )
        bookmark.tags = tags

        await self._save(db, bookmark)
        logger.info("Bookmark created: %s (%d tags)", bookmark.id, len(bookmark.tag_rows))
        return self.to_response(bookmark)

    async def update(
        self,
        db: AsyncSession,
        owner_id: UUID,
        raw_id: str,
        payload: BookmarkUpdate,
    ) -> BookmarkResponse:
        changes = self._collect_changes(payload)
        bookmark = await self._get_owned(db, owner_id, raw_id)

        for name, value in changes.items():
            setattr(bookmark, name, value)
        bookmark.updated_at = datetime.now(timezone.utc)

        await self._save(db, bookmark)
        logger.info("Bookmark updated: %s (fields=%s)", bookmark.id, sorted(changes))
        return self.to_response(bookmark)

    def _collect_changes(self, payload: BookmarkUpdate) -> Dict[str, Any]:
        present = payload.model_fields_set
        changes: Dict[str, Any] = {}
        if "url" in present:
            changes["url"] = self._validate_url(payload.url)
        if "title" in present:
            changes["title"] = self.optional_text(payload.title)
        if "description" in present:
            changes["description"] = self.optional_text(payload.description)
        if "tags" in present:
            changes["tags"] = normalize_tags(payload.tags)
        if "is_favorite" in present and payload.is_favorite is not None:
            changes["is_favorite"] = payload.is_favorite
        return changes

    def _validate_url(self, raw: Any) -> str:
        url = self.require_text(raw, "URL is required", "url")
        if not URL_PATTERN.match(url):
            raise ValidationError(message=INVALID_URL_MESSAGE, field="url")
        return url

    async def _derive_title(self, url: str) -> str:
        """
        Title from the page, else the URL itself.

        Derived titles are cut to the column limit; only titles the client
        typed are rejected for length.
        """
        fetched = await metadata_fetcher.fetch_title(url)
        if fetched:
            logger.info("Using fetched title for %s", url)
        else:
            logger.info("No title fetched for %s, using URL as title", url)
        return (fetched or url)[:TITLE_MAX_LENGTH].strip()

    def to_response(self, bookmark: Bookmark) -> BookmarkResponse:
        return BookmarkResponse(
            id=bookmark.id,
            url=bookmark.url,
            title=bookmark.title,
            description=bookmark.description or "",
            tags=bookmark.tags,
            is_favorite=bookmark.is_favorite,
            created_at=bookmark.created_at,
            updated_at=bookmark.updated_at,
        )


bookmark_service = BookmarkService()
