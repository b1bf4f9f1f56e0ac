from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models.row_data import CanonicalRow

"""Case-insensitive deduplication against the owner's words and the file itself.

The existing word set is fetched once per run by the caller; everything here
is in-memory set membership.
"""

__all__ = [
    "DedupeResult",
    "dedupe",
]


@dataclass(frozen=True)
class DedupeResult:
    to_insert: list[CanonicalRow] = field(default_factory=list)
    duplicate_count: int = 0


def dedupe(valid_rows: Iterable[CanonicalRow], existing_words: Iterable[str]) -> DedupeResult:
    """Drop rows whose lowercase word already exists or appeared earlier in the file."""
    seen = {w.lower() for w in existing_words}
    to_insert: list[CanonicalRow] = []
    duplicates = 0
    for row in valid_rows:
        if row.key in seen:
            duplicates += 1
            continue
        seen.add(row.key)
        to_insert.append(row)
    return DedupeResult(to_insert=to_insert, duplicate_count=duplicates)
