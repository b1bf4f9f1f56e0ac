from __future__ import annotations

import json

from vocab_import.models.error_record import FILE_LEVEL_ROW, ErrorRecord


def test_error_record_file_level_row():
    rec = ErrorRecord.create(file="words.xlsx", row=FILE_LEVEL_ROW, error_type="DECODE_ERROR", message="empty file")
    assert rec.row == -1
    data = json.loads(rec.to_json_line())
    assert data["row"] == -1
    assert data["timestamp"].endswith("Z")
    assert set(data) == {"timestamp", "file", "row", "error_type", "message"}


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create(file="单词表.csv", row=3, error_type="VALIDATION_ERROR", message="word required")
    line = rec.to_json_line()
    assert "单词表.csv" in line
    assert json.loads(line)["row"] == 3
