from __future__ import annotations

from typing import Any

import jsonschema

from ..models.row_data import CANONICAL_FIELDS, CanonicalRow, Invalid, RawRow, Valid, ValidationOutcome

"""Row validator.

The row rules are a JSON Schema checked with jsonschema (same library the
config loader uses). Every violated rule becomes one human readable reason
that names the field, e.g. "word required" or "level must be a string".
Rows are judged independently; callers keep going after an Invalid.
"""

__all__ = [
    "ROW_SCHEMA",
    "validate",
    "validate_rows",
]

_OPTIONAL_STRING = {"type": "string"}

ROW_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["word", "meaning"],
    "properties": {
        "word": {"type": "string", "minLength": 1},
        "meaning": {"type": "string", "minLength": 1},
        "phonetic": _OPTIONAL_STRING,
        "part_of_speech": _OPTIONAL_STRING,
        "level": _OPTIONAL_STRING,
        "example_en": _OPTIONAL_STRING,
        "example_cn": _OPTIONAL_STRING,
    },
    "additionalProperties": False,
}

_validator = jsonschema.Draft7Validator(ROW_SCHEMA)

# minLength and additionalProperties never fire for normalizer output (empty
# cells are dropped, only canonical keys are emitted); they guard direct callers.
_RULE_TEXT = {
    "required": "required",
    "type": "must be a string",
    "minLength": "must not be empty",
    "additionalProperties": "is not a recognized field",
}


def _reasons(normalized: dict[str, Any]) -> list[str]:
    found: dict[tuple[str, str], None] = {}
    for error in _validator.iter_errors(normalized):
        if error.validator == "required":
            # one error per missing property; recover names from the instance
            for name in error.validator_value:
                if name not in normalized:
                    found[(name, "required")] = None
        elif error.validator == "additionalProperties":
            for name in normalized:
                if name not in ROW_SCHEMA["properties"]:
                    found[(name, "additionalProperties")] = None
        elif error.absolute_path:
            found[(str(error.absolute_path[0]), str(error.validator))] = None
        else:
            found[("row", str(error.validator))] = None

    order = {name: i for i, name in enumerate(CANONICAL_FIELDS)}
    ordered = sorted(found, key=lambda k: (order.get(k[0], len(order)), k[1]))
    return [f"{name} {_RULE_TEXT.get(rule, f'violates {rule}')}" for name, rule in ordered]


def validate(row_number: int, normalized: dict[str, Any], raw: RawRow) -> ValidationOutcome:
    """Check one normalized row; return Valid(CanonicalRow) or Invalid(reasons)."""
    reasons = _reasons(normalized)
    if reasons:
        return Invalid(row_number=row_number, reasons=reasons, raw=raw)
    return Valid(row_number=row_number, row=CanonicalRow(**normalized))


def validate_rows(pairs: list[tuple[RawRow, dict[str, Any]]]) -> tuple[list[Valid], list[Invalid]]:
    """Validate every (raw, normalized) pair, split into valid and invalid."""
    valid: list[Valid] = []
    invalid: list[Invalid] = []
    for raw, normalized in pairs:
        outcome = validate(raw.row_number, normalized, raw)
        if isinstance(outcome, Valid):
            valid.append(outcome)
        else:
            invalid.append(outcome)
    return valid, invalid
