"""
Markpad Backend — Bookmark Route Handlers
===========================================

What:  CRUD endpoints for the caller's bookmarks (same shape as notes).

Routes:
    POST   /api/bookmarks                      create   → 201 Bookmark
    GET    /api/bookmarks?q=&tags=&favorite=   list     → 200 Bookmark[]
    GET    /api/bookmarks/{bookmark_id}        get one  → 200 Bookmark
    PUT    /api/bookmarks/{bookmark_id}        update   → 200 Bookmark
    DELETE /api/bookmarks/{bookmark_id}        delete   → 200 {"message"}

POST may take up to the metadata fetch timeout when no title is sent.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from app.schemas.common import ErrorResponse, MessageResponse
from app.security import get_current_user
from app.services.bookmark_service import bookmark_service
from app.services.query_builder import RecordQuery

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookmarks", tags=["Bookmarks"])

_AUTH_RESPONSES = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
_ID_RESPONSES = {
    400: {"description": "Invalid bookmark ID or body", "model": ErrorResponse},
    404: {"description": "Bookmark not found", "model": ErrorResponse},
    **_AUTH_RESPONSES,
}


@router.post(
    "",
    status_code=201,
    response_model=BookmarkResponse,
    responses={400: {"description": "Validation failed", "model": ErrorResponse}, **_AUTH_RESPONSES},
    summary="Create a bookmark",
    description="When `title` is blank or absent it is fetched from the page, or set to the URL.",
)
async def create_bookmark(
    payload: BookmarkCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookmarkResponse:
    return await bookmark_service.create(db, user.id, payload)


@router.get(
    "",
    response_model=List[BookmarkResponse],
    responses=_AUTH_RESPONSES,
    summary="List bookmarks, newest first",
    description=(
        "`q` matches title, description or URL case-insensitively; `tags` is a "
        "comma-separated list matched with OR; `favorite=true` keeps only favorites."
    ),
)
async def list_bookmarks(
    response: Response,
    q: Optional[str] = Query(default=None),
    tags: Optional[str] = Query(default=None),
    favorite: Optional[str] = Query(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[BookmarkResponse]:
    query = RecordQuery.from_params(q=q, tags=tags, favorite=favorite)
    bookmarks = await bookmark_service.list_records(db, user.id, query)
    response.headers["X-Total-Count"] = str(len(bookmarks))
    return bookmarks


@router.get("/{bookmark_id}", response_model=BookmarkResponse, responses=_ID_RESPONSES)
async def get_bookmark(
    bookmark_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookmarkResponse:
    return await bookmark_service.get_record(db, user.id, bookmark_id)


@router.put("/{bookmark_id}", response_model=BookmarkResponse, responses=_ID_RESPONSES)
async def update_bookmark(
    bookmark_id: str,
    payload: BookmarkUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookmarkResponse:
    return await bookmark_service.update(db, user.id, bookmark_id, payload)


@router.delete("/{bookmark_id}", response_model=MessageResponse, responses=_ID_RESPONSES)
async def delete_bookmark(
    bookmark_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await bookmark_service.delete_record(db, user.id, bookmark_id)
