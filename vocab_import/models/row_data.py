from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

"""Row models for the vocabulary import pipeline.

RawRow is what the decoder yields: a loosely typed mapping in file order.
CanonicalRow is the fixed word shape the validator builds; nothing past the
validator sees a RawRow except as failure diagnostics.
"""

__all__ = [
    "RawRow",
    "CanonicalRow",
    "CANONICAL_FIELDS",
    "Valid",
    "Invalid",
    "ValidationOutcome",
]

# Canonical field order (also the order reasons are reported in)
CANONICAL_FIELDS: tuple[str, ...] = (
    "word",
    "meaning",
    "phonetic",
    "part_of_speech",
    "level",
    "example_en",
    "example_cn",
)


@dataclass(frozen=True)
class RawRow:
    """One decoded, not yet interpreted record from the uploaded file.

    The row_number refers to the data-row position in the file (header
    excluded, 1-based), so blank rows skipped by the decoder still count.
    """
    row_number: int  # 1-based data row position
    values: dict[str, Any] = field(default_factory=dict)  # column label -> scalar / None


@dataclass(frozen=True)
class CanonicalRow:
    """A validated word row ready for deduplication and persistence."""
    word: str
    meaning: str
    phonetic: str | None = None
    part_of_speech: str | None = None
    level: str | None = None
    example_en: str | None = None
    example_cn: str | None = None

    @property
    def key(self) -> str:
        """Case-insensitive identity of the word within one owner."""
        return self.word.lower()


@dataclass(frozen=True)
class Valid:
    row_number: int
    row: CanonicalRow


@dataclass(frozen=True)
class Invalid:
    row_number: int
    reasons: list[str]
    raw: RawRow

    @property
    def reason(self) -> str:
        return "; ".join(self.reasons)


ValidationOutcome = Union[Valid, Invalid]
