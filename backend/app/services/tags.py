"""
Markpad Backend — Tag Normalizer
==================================

What:  Turns whatever the client sent as `tags` into a clean, ordered tag list.
Who:   Called by NoteService and BookmarkService on create and on update when
       the body carries `tags`.

Accepted shapes (TagInput):
    - a sequence:  ["work", " work ", "", 42]      → ["work", "42"]
                   [True, 1.0, 2.5]                 → ["true", "1", "2.5"]
    - a string:    "foo, bar #baz  qux"            → ["foo", "bar", "baz", "qux"]
    - anything else (None, numbers, objects)        → []

Output guarantees:
    - no empty or whitespace-only entries
    - no duplicates; first occurrence wins, order is preserved
    - idempotent: normalizing an already-normalized list returns it unchanged

Malformed input degrades to an empty list. This function never raises.
"""

import re
from typing import Any, List, Sequence, Union

TagInput = Union[Sequence[Any], str, None]

# Runs of commas, whitespace and hash marks separate tags in string input
_SEPARATORS = re.compile(r"[,\s#]+")


def _split_string(raw: str) -> List[str]:
    return [piece.strip() for piece in _SEPARATORS.split(raw)]


def _to_text(item: Any) -> str:
    """Render one list element the way a JSON client would write it."""
    if item is None:
        return ""
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, float) and item.is_integer():
        return str(int(item))
    return str(item)


def _coerce_sequence(raw: Sequence[Any]) -> List[str]:
    return [_to_text(item).strip() for item in raw]


def normalize_tags(raw: TagInput) -> List[str]:
    """
    Normalize a freeform tag input into a deduplicated, ordered list.

    Args:
        raw: A list/tuple of values, a delimited string, or None.

    Returns:
        Unique non-empty trimmed tags in first-seen order.
    """
    if isinstance(raw, str):
        candidates = _split_string(raw)
    elif isinstance(raw, (list, tuple)):
        candidates = _coerce_sequence(raw)
    else:
        return []

    # dict.fromkeys keeps insertion order
    return list(dict.fromkeys(tag for tag in candidates if tag))
