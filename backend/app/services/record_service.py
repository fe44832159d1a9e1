"""
Markpad Backend — Owned Record Service Base
=============================================

What:  The CRUD shape shared by notes and bookmarks.
Why:   Both resources resolve ids the same way, scope every query to the
       owner the same way, and report the same errors. Only field
       validation and create/update payloads differ.
How:   Subclasses set `model`/`resource` and implement create(),
       update() and to_response().

Id resolution policy (get / update / delete):
    "abc"                       → InvalidIdError  (400 "Invalid note ID")
    valid UUID, no such record  → NotFoundError   (404 "Note not found")
    valid UUID, other owner     → NotFoundError   (404, same as missing)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    DatabaseError,
    InvalidIdError,
    NotFoundError,
    RecordValidationError,
    ValidationError,
)
from app.schemas.common import MessageResponse
from app.services.query_builder import RecordQuery, build_record_filter

logger = logging.getLogger(__name__)


class OwnedRecordService(ABC):
    """
    Base service for records that belong to exactly one user.

    Class attributes set by subclasses:
        model:     SQLAlchemy model class (Note, Bookmark)
        resource:  Display name used in messages ("Note", "Bookmark")
    """

    model: Any = None
    resource: str = "Record"

    # ── Abstract operations ───────────────────────────────────────────────

    @abstractmethod
    async def create(self, db: AsyncSession, owner_id: UUID, payload: Any) -> Any:
        """Validate `payload`, persist a new record for `owner_id`, return its response."""
        ...

    @abstractmethod
    async def update(self, db: AsyncSession, owner_id: UUID, raw_id: str, payload: Any) -> Any:
        """Apply the fields present in `payload` to the owner's record."""
        ...

    @abstractmethod
    def to_response(self, record: Any) -> Any:
        """Convert an ORM record into its API response model."""
        ...

    # ── Shared operations ─────────────────────────────────────────────────

    async def list_records(
        self,
        db: AsyncSession,
        owner_id: UUID,
        query: Optional[RecordQuery] = None,
    ) -> List[Any]:
        """
        List the owner's records matching `query`, newest first.

        Query plan:
            SELECT ... WHERE user_id = :owner [AND filters]
            ORDER BY created_at DESC
            → idx_<table>_user_created_at
        """
        query = query or RecordQuery()
        statement = (
            select(self.model)
            .where(*build_record_filter(self.model, owner_id, query))
            .order_by(desc(self.model.created_at))
        )
        try:
            result = await db.execute(statement)
            records = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing %ss: %s", self.resource.lower(), str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not retrieve {self.resource.lower()}s. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Listed %d %s(s) for user %s (filtered=%s)",
            len(records),
            self.resource.lower(),
            owner_id,
            not query.is_empty,
        )
        return [self.to_response(record) for record in records]

    async def get_record(self, db: AsyncSession, owner_id: UUID, raw_id: str) -> Any:
        record = await self._get_owned(db, owner_id, raw_id)
        return self.to_response(record)

    async def delete_record(self, db: AsyncSession, owner_id: UUID, raw_id: str) -> MessageResponse:
        record = await self._get_owned(db, owner_id, raw_id)
        try:
            await db.delete(record)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting %s %s: %s", self.resource.lower(), raw_id, str(e))
            raise DatabaseError(context={"record_id": raw_id})

        logger.info("%s deleted: %s", self.resource, raw_id)
        return MessageResponse(message=f"{self.resource} deleted successfully")

    # ── Helpers for subclasses ────────────────────────────────────────────

    def parse_id(self, raw_id: str) -> UUID:
        """Parse a path id; anything that is not a UUID is an InvalidIdError."""
        try:
            return UUID(str(raw_id))
        except ValueError:
            raise InvalidIdError(resource=self.resource.lower(), raw_id=raw_id)

    async def _get_owned(self, db: AsyncSession, owner_id: UUID, raw_id: str) -> Any:
        """Fetch by (id, owner). Missing and foreign records look the same."""
        record_id = self.parse_id(raw_id)
        try:
            result = await db.execute(
                select(self.model).where(
                    self.model.id == record_id,
                    self.model.user_id == owner_id,
                )
            )
            record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching %s %s: %s", self.resource.lower(), raw_id, str(e))
            raise DatabaseError(context={"record_id": raw_id})

        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=raw_id)
        return record

    async def _save(self, db: AsyncSession, record: Any) -> None:
        """Run record-level validation, then add and flush (commit is per-request)."""
        errors = record.validate()
        if errors:
            raise RecordValidationError(errors, context={"resource": self.resource})

        try:
            db.add(record)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving %s: %s", self.resource.lower(), str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not save the {self.resource.lower()}. Please try again.",
                context={"error_type": type(e).__name__},
            )

    @staticmethod
    def require_text(value: Any, message: str, field: str) -> str:
        """Return `value` trimmed, or raise ValidationError if it is not a non-blank string."""
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(message=message, field=field)
        return value.strip()

    @staticmethod
    def optional_text(value: Optional[str]) -> str:
        return value.strip() if value else ""
