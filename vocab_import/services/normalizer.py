from __future__ import annotations

from typing import Any

from ..models.row_data import RawRow

"""Field normalizer: bilingual column labels -> canonical field names.

Uploaded word lists come with English or Chinese headers (and occasionally
odd casing / padding). Each canonical field is looked up through a static
alias list; the first non-empty value wins. No type coercion beyond string
trimming happens here, and nothing fails: absent fields are simply omitted
and left for the validator to judge.
"""

__all__ = [
    "FIELD_ALIASES",
    "normalize",
    "label_key",
]

# canonical field -> aliases in lookup order (English first, then Chinese)
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "word": ("word", "单词"),
    "meaning": ("meaning", "释义"),
    "phonetic": ("phonetic", "音标"),
    "part_of_speech": ("partOfSpeech", "part_of_speech", "词性"),
    "level": ("level", "等级"),
    "example_en": ("example", "example_en", "例句"),
    "example_cn": ("example_cn", "exampleCn", "例句翻译"),
}


def label_key(label: str) -> str:
    """Comparison key for a column label (trimmed, case-folded)."""
    return label.strip().casefold()


_ALIAS_KEYS: dict[str, tuple[str, ...]] = {
    field: tuple(label_key(a) for a in aliases) for field, aliases in FIELD_ALIASES.items()
}


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def normalize(raw: RawRow) -> dict[str, Any]:
    """Map a RawRow onto canonical field names (not yet validated)."""
    by_key: dict[str, Any] = {}
    for label, value in raw.values.items():
        cleaned = _clean(value)
        if cleaned is None:
            continue
        # 同一キーが複数列にある場合は先勝ち
        by_key.setdefault(label_key(str(label)), cleaned)

    normalized: dict[str, Any] = {}
    for field, keys in _ALIAS_KEYS.items():
        for key in keys:
            if key in by_key:
                normalized[field] = by_key[key]
                break
    return normalized
