"""
Markpad Backend — Record Query Builder
========================================

What:  Translates the list endpoint's query parameters into SQL filter clauses.
Who:   Called by OwnedRecordService.list_records() for notes and bookmarks.

Two steps:
    1. RecordQuery.from_params() parses the raw strings (`q`, `tags`,
       `favorite`) into a typed value. Pure, no database involved.
    2. build_record_filter() turns that value into SQLAlchemy clauses for a
       given model. The caller ANDs them together in a WHERE.

Filter semantics:
    owner       always   model.user_id == owner_id
    q           if set   any search field contains q (case-insensitive, literal)
    tags        if set   record has at least one of the listed tags
    favorite    "true"   is_favorite is true; any other value is ignored

Search fields come from the model's `search_fields` attribute:
    Note      title, content
    Bookmark  title, description, url
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import ColumnElement, or_, true


@dataclass(frozen=True)
class RecordQuery:
    """Parsed list filters. Empty values impose no constraint."""

    term: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    favorites_only: bool = False

    @classmethod
    def from_params(
        cls,
        q: Optional[str] = None,
        tags: Optional[str] = None,
        favorite: Optional[str] = None,
    ) -> "RecordQuery":
        tag_list: Tuple[str, ...] = ()
        if tags:
            tag_list = tuple(tag.strip() for tag in tags.split(",") if tag.strip())
        return cls(
            term=q or None,
            tags=tag_list,
            favorites_only=favorite == "true",
        )

    @property
    def is_empty(self) -> bool:
        return self.term is None and not self.tags and not self.favorites_only


def build_record_filter(model, owner_id: UUID, query: RecordQuery) -> List[ColumnElement]:
    """
    Build the WHERE clauses for listing `model` records owned by `owner_id`.

    Args:
        model:    Note or Bookmark (anything with user_id, is_favorite,
                  search_fields, tag_model and a tag_rows relationship).
        owner_id: The requesting user's id.
        query:    Parsed filters from RecordQuery.from_params().

    Returns:
        List of clauses to pass to Select.where(*clauses).
    """
    clauses: List[ColumnElement] = [model.user_id == owner_id]

    if query.term is not None:
        # autoescape: % and _ in the term are matched literally
        clauses.append(
            or_(
                *(
                    getattr(model, name).icontains(query.term, autoescape=True)
                    for name in model.search_fields
                )
            )
        )

    if query.tags:
        # EXISTS over the tag rows: any listed tag is enough
        clauses.append(model.tag_rows.any(model.tag_model.name.in_(query.tags)))

    if query.favorites_only:
        clauses.append(model.is_favorite.is_(true()))

    return clauses
