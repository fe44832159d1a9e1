"""
Markpad Backend — Notes Route Handlers
========================================

What:  CRUD endpoints for the caller's notes.
How:   Resolves the caller via get_current_user, delegates to NoteService.

Routes:
    POST   /api/notes                      create        → 201 Note
    GET    /api/notes?q=&tags=&favorite=   list          → 200 Note[]
    GET    /api/notes/{note_id}            get one       → 200 Note
    PUT    /api/notes/{note_id}            update        → 200 Note
    DELETE /api/notes/{note_id}            delete        → 200 {"message"}

`note_id` is taken as a plain string so a malformed id reaches the service
and is reported as 400 "Invalid note ID" instead of FastAPI's 422.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from app.security import get_current_user
from app.services.note_service import note_service
from app.services.query_builder import RecordQuery

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_AUTH_RESPONSES = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
_ID_RESPONSES = {
    400: {"description": "Invalid note ID or body", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
    **_AUTH_RESPONSES,
}


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses={400: {"description": "Validation failed", "model": ErrorResponse}, **_AUTH_RESPONSES},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create(db, user.id, payload)


@router.get(
    "",
    response_model=List[NoteResponse],
    responses=_AUTH_RESPONSES,
    summary="List notes, newest first",
    description=(
        "`q` matches title or content case-insensitively; `tags` is a comma-separated "
        "list matched with OR; `favorite=true` keeps only favorites."
    ),
)
async def list_notes(
    response: Response,
    q: Optional[str] = Query(default=None, description="Free-text search"),
    tags: Optional[str] = Query(default=None, description="Comma-separated tags (any match)"),
    favorite: Optional[str] = Query(default=None, description="'true' for favorites only"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    query = RecordQuery.from_params(q=q, tags=tags, favorite=favorite)
    notes = await note_service.list_records(db, user.id, query)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_ID_RESPONSES,
    summary="Get a note",
)
async def get_note(
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_record(db, user.id, note_id)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_ID_RESPONSES,
    summary="Update a note",
    description="Only the fields present in the body are changed.",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update(db, user.id, note_id, payload)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses=_ID_RESPONSES,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.delete_record(db, user.id, note_id)
