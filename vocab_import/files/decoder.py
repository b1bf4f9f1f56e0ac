from __future__ import annotations

import io
import json
from datetime import date, datetime
from enum import Enum
from pathlib import PurePath
from typing import Any

import numpy as np
import pandas as pd

from ..models.row_data import RawRow

"""Upload decoder: bytes -> ordered RawRows.

Spreadsheet (first sheet only) and CSV payloads are read through pandas; the
first non-empty row of the used range is the header (a table may start at B2); JSON payloads must be a top-level array of flat
objects. The decoder never interprets column meaning; that is the
normalizer's job.

NA handling: pandas' default NA strings are disabled so words such as "null"
or "NA" survive as text. Only truly empty cells become None.
"""

__all__ = [
    "DecodeError",
    "SourceFormat",
    "resolve_format",
    "decode",
    "check_size",
    "MAX_FILE_SIZE_BYTES",
]

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

SPREADSHEET_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}
CSV_MIME_TYPES = {"text/csv", "application/csv", "text/comma-separated-values"}
JSON_MIME_TYPES = {"application/json", "text/json"}
# Declared types that say nothing reliable about the content
AMBIGUOUS_MIME_TYPES = {"", "application/octet-stream", "application/vnd.ms-excel"}

EXTENSION_FORMATS = {
    ".xlsx": "spreadsheet",
    ".csv": "csv",
    ".json": "json",
}

# OLE2 compound document header (legacy .xls workbooks)
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
LEGACY_XLS_MESSAGE = "legacy .xls workbooks are not supported; save the file as .xlsx"


class DecodeError(Exception):
    """Raised when the upload is oversized, empty or cannot be parsed."""


class SourceFormat(Enum):
    SPREADSHEET = "spreadsheet"
    CSV = "csv"
    JSON = "json"


def resolve_format(mime_type: str | None, filename: str | None = None) -> SourceFormat:
    """Pick the source format from the declared MIME type, then the file name.

    The extension is only consulted when the MIME type is missing or
    ambiguous (browsers report CSV files as application/vnd.ms-excel on
    Windows).
    """
    mime = (mime_type or "").split(";", 1)[0].strip().lower()
    if mime in AMBIGUOUS_MIME_TYPES and filename:
        suffix = PurePath(filename).suffix.lower()
        if suffix == ".xls":
            raise DecodeError(LEGACY_XLS_MESSAGE)
        by_ext = EXTENSION_FORMATS.get(suffix)
        if by_ext is not None:
            return SourceFormat(by_ext)
    if mime in SPREADSHEET_MIME_TYPES:
        return SourceFormat.SPREADSHEET
    if mime in CSV_MIME_TYPES:
        return SourceFormat.CSV
    if mime in JSON_MIME_TYPES:
        return SourceFormat.JSON
    raise DecodeError(f"unsupported file type: {mime_type or 'unknown'} ({filename or '<upload>'})")


def check_size(size: int, max_bytes: int = MAX_FILE_SIZE_BYTES) -> None:
    """Raise DecodeError when an upload of size bytes is over the limit."""
    if size > max_bytes:
        raise DecodeError(f"file size exceeds {max_bytes // (1024 * 1024)}MB limit ({size} bytes)")


def decode(
    payload: bytes,
    mime_type: str | None,
    filename: str | None = None,
    max_bytes: int = MAX_FILE_SIZE_BYTES,
) -> list[RawRow]:
    """Decode an uploaded payload into RawRows in file order.

    Raises
    ------
    DecodeError
        payload larger than max_bytes, unsupported / unparseable content,
        no data rows, or a JSON top-level value that is not an array.
    """
    check_size(len(payload), max_bytes)
    fmt = resolve_format(mime_type, filename)
    if fmt is SourceFormat.JSON:
        rows = _decode_json(payload)
    else:
        rows = _frame_to_rows(_read_frame(payload, fmt))
    if not rows:
        raise DecodeError("empty file")
    return rows


def _read_frame(payload: bytes, fmt: SourceFormat) -> pd.DataFrame:
    # ヘッダなしで生読み (使用範囲の先頭行を後でヘッダとして適用)
    if fmt is SourceFormat.SPREADSHEET and payload.startswith(OLE2_MAGIC):
        raise DecodeError(LEGACY_XLS_MESSAGE)
    try:
        if fmt is SourceFormat.SPREADSHEET:
            return pd.read_excel(
                io.BytesIO(payload), sheet_name=0, header=None, keep_default_na=False
            )
        return pd.read_csv(
            io.BytesIO(payload),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as e:
        raise DecodeError("empty file") from e
    except Exception as e:
        raise DecodeError(f"failed to read {fmt.value}: {e}") from e


def _frame_to_rows(df: pd.DataFrame) -> list[RawRow]:
    """Apply the first used row as header and turn remaining rows into RawRows.

    Row numbers count data rows below the header (1-based), blank ones included.
    """
    df = _trim_leading_blank(df)
    if df.shape[0] < 1:
        return []
    header = [_header_label(c) for c in df.iloc[0].tolist()]
    rows: list[RawRow] = []
    for offset, raw in enumerate(df.iloc[1:].itertuples(index=False, name=None), start=1):
        values: dict[str, Any] = {}
        for label, cell in zip(header, raw, strict=False):
            if not label or label in values:
                continue  # blank header or repeated label: first column wins
            values[label] = _cell_value(cell)
        if all(v is None for v in values.values()):
            continue  # blank row, numbering still advances
        rows.append(RawRow(row_number=offset, values=values))
    return rows


def _trim_leading_blank(df: pd.DataFrame) -> pd.DataFrame:
    """Drop empty rows above and empty columns left of the used range."""
    if df.empty:
        return df
    filled = df.map(lambda v: _cell_value(v) is not None)
    used_rows = filled.any(axis=1).to_numpy()
    if not used_rows.any():
        return df.iloc[0:0]
    used_cols = filled.any(axis=0).to_numpy()
    return df.iloc[int(np.argmax(used_rows)):, int(np.argmax(used_cols)):]


def _header_label(value: Any) -> str:
    cell = _cell_value(value)
    return "" if cell is None else str(cell).strip()


def _cell_value(value: Any) -> Any:
    """Convert a pandas cell to a JSON friendly scalar (None when empty)."""
    if value is None:
        return None
    if isinstance(value, str):
        return None if value.strip() == "" else value
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _decode_json(payload: bytes) -> list[RawRow]:
    try:
        data = json.loads(payload.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise DecodeError("JSON content must be an array of words")
    rows: list[RawRow] = []
    for index, item in enumerate(data, start=1):
        # 非オブジェクト要素は空行として扱い、検証段階で失敗として報告する
        values = {str(k): v for k, v in item.items()} if isinstance(item, dict) else {}
        rows.append(RawRow(row_number=index, values=values))
    return rows
