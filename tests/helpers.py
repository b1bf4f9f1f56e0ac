"""Payload builders shared by the test suites."""
from __future__ import annotations

import io
import json
from typing import Any

import pandas as pd

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
JSON_MIME = "application/json"
CSV_MIME = "text/csv"


def make_xlsx(rows: list[list[Any]]) -> bytes:
    """Build an xlsx payload; rows[0] is the header row."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Words", header=False, index=False)
    return buf.getvalue()


def make_json(items: list[Any]) -> bytes:
    return json.dumps(items, ensure_ascii=False).encode("utf-8")


def word_items(count: int, prefix: str = "word") -> list[dict[str, str]]:
    return [{"word": f"{prefix}{i}", "meaning": f"释义{i}"} for i in range(1, count + 1)]
