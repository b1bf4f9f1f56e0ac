from __future__ import annotations

import json
from pathlib import Path

from vocab_import.logging.error_log import ErrorLogBuffer
from vocab_import.models.error_record import ErrorRecord


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.create("a.json", 1, "VALIDATION_ERROR", "word required"))
    buf.append(ErrorRecord.create("a.json", -1, "PERSIST_ERROR", "chunk 1 failed"))
    assert len(buf) == 2
    path = buf.flush()
    assert path is not None and path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["error_type"] for line in lines] == ["VALIDATION_ERROR", "PERSIST_ERROR"]
    assert len(buf) == 0


def test_flush_empty_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("a.csv", 1, "VALIDATION_ERROR", "x"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a.csv", 2, "VALIDATION_ERROR", "y"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2
