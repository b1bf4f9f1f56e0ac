from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Aggregate result models for one import run.

ImportSummary is created once by the reporter and never mutated afterwards.
The failures list is a display-capped view; failed_count is always the true
number of rejected rows.
"""

__all__ = [
    "ImportFailure",
    "ImportSummary",
]


@dataclass(frozen=True)
class ImportFailure:
    """One rejected row as shown to the caller."""
    row: int  # 1-based data row
    reason: str
    data: dict[str, Any]  # original RawRow values

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "reason": self.reason, "data": dict(self.data)}


@dataclass(frozen=True)
class ImportSummary:
    """Aggregated result of one pipeline run."""
    total_rows: int  # decoded rows
    imported_count: int  # rows committed to the store
    duplicate_count: int  # rows skipped as existing / in-file duplicates
    failed_count: int  # true number of validation failures
    failures: tuple[ImportFailure, ...] = field(default_factory=tuple)  # capped
    elapsed_seconds: float = 0.0

    @property
    def truncated(self) -> bool:
        return self.failed_count > len(self.failures)

    def to_response(self) -> dict[str, Any]:
        """Caller-facing JSON body."""
        return {
            "success": True,
            "total": self.total_rows,
            "imported": self.imported_count,
            "duplicates": self.duplicate_count,
            "failed": self.failed_count,
            "errors": [f.to_dict() for f in self.failures],
        }
