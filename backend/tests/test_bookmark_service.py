"""
Markpad Backend — Bookmark Service Unit Tests
===============================================

What:  URL validation and title derivation for bookmarks.
How:   Mock DB session; the metadata fetcher is patched out.

What we test:
    ✅ URL required and must be http(s)
    ✅ Missing/blank title → fetched title, else the raw URL
    ✅ Given title → fetcher never called
    ✅ Derived titles cut to 200 characters; typed titles rejected instead
    ✅ Update: present fields only, url re-validated
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from app.exceptions import RecordValidationError, ValidationError
from app.models.bookmark import INVALID_URL_MESSAGE, Bookmark
from app.schemas.bookmark import BookmarkCreate, BookmarkUpdate
from app.services.bookmark_service import BookmarkService


@pytest.fixture
def mock_fetcher():
    with patch("app.services.bookmark_service.metadata_fetcher") as fetcher:
        fetcher.fetch_title = AsyncMock(return_value=None)
        yield fetcher


class TestBookmarkServiceCreate:

    def setup_method(self):
        self.service = BookmarkService()
        self.owner_id = uuid4()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["ftp://x.com", "example.com", "http:/broken", "https://"])
    async def test_invalid_url_rejected(self, mock_db_session, mock_fetcher, url):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_db_session, self.owner_id, BookmarkCreate(url=url))

        assert exc_info.value.message == INVALID_URL_MESSAGE
        mock_fetcher.fetch_title.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_url_rejected(self, mock_db_session, mock_fetcher):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_db_session, self.owner_id, BookmarkCreate(title="x"))
        assert exc_info.value.message == "URL is required"

    @pytest.mark.asyncio
    async def test_no_title_and_no_metadata_uses_url(self, mock_db_session, mock_fetcher):
        url = "https://example.com/article"

        result = await self.service.create(mock_db_session, self.owner_id, BookmarkCreate(url=url))

        assert result.title == url
        mock_fetcher.fetch_title.assert_awaited_once_with(url)

    @pytest.mark.asyncio
    async def test_blank_title_uses_fetched_title(self, mock_db_session, mock_fetcher):
        mock_fetcher.fetch_title.return_value = "Example Article"

        result = await self.service.create(
            mock_db_session,
            self.owner_id,
            BookmarkCreate(url="https://example.com", title="   "),
        )

        assert result.title == "Example Article"

    @pytest.mark.asyncio
    async def test_given_title_skips_fetch(self, mock_db_session, mock_fetcher):
        result = await self.service.create(
            mock_db_session,
            self.owner_id,
            BookmarkCreate(url="https://example.com", title=" Mine ", description=" d ", tags=["a", "a"]),
        )

        assert result.title == "Mine"
        assert result.description == "d"
        assert result.tags == ["a"]
        mock_fetcher.fetch_title.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_long_fetched_title_is_truncated(self, mock_db_session, mock_fetcher):
        mock_fetcher.fetch_title.return_value = "T" * 500

        result = await self.service.create(
            mock_db_session, self.owner_id, BookmarkCreate(url="https://example.com")
        )

        assert result.title == "T" * 200

    @pytest.mark.asyncio
    async def test_long_typed_title_is_rejected(self, mock_db_session, mock_fetcher):
        with pytest.raises(RecordValidationError) as exc_info:
            await self.service.create(
                mock_db_session,
                self.owner_id,
                BookmarkCreate(url="https://example.com", title="T" * 201, description="D" * 501),
            )

        assert exc_info.value.message == (
            "Title cannot exceed 200 characters, Description cannot exceed 500 characters"
        )

    @pytest.mark.asyncio
    async def test_description_defaults_to_empty(self, mock_db_session, mock_fetcher):
        result = await self.service.create(
            mock_db_session, self.owner_id, BookmarkCreate(url="https://example.com", title="t")
        )
        assert result.description == ""
        assert result.is_favorite is False


class TestBookmarkServiceUpdate:

    def setup_method(self):
        self.service = BookmarkService()
        self.owner_id = uuid4()

    def _existing(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        bookmark = Bookmark(
            id=uuid4(),
            user_id=self.owner_id,
            url="https://example.com",
            title="Example",
            description="Old",
            is_favorite=True,
            created_at=now,
            updated_at=now,
        )
        bookmark.tags = ["ref"]
        return bookmark

    @pytest.mark.asyncio
    async def test_bad_url_rejected_before_lookup(self, mock_db_session, mock_fetcher):
        with pytest.raises(ValidationError):
            await self.service.update(
                mock_db_session, self.owner_id, str(uuid4()), BookmarkUpdate(url="mailto:a@b.c")
            )
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_update(self, mock_db_session, mock_fetcher):
        bookmark = self._existing()
        result_proxy = MagicMock()
        result_proxy.scalar_one_or_none.return_value = bookmark
        mock_db_session.execute.return_value = result_proxy

        result = await self.service.update(
            mock_db_session,
            self.owner_id,
            str(bookmark.id),
            BookmarkUpdate.model_validate({"description": None, "tags": "x y"}),
        )

        assert result.description == ""
        assert result.tags == ["x", "y"]
        assert result.title == "Example"
        assert result.url == "https://example.com"
        assert result.is_favorite is True
        mock_fetcher.fetch_title.assert_not_awaited()
