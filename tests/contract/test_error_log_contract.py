from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from tests.helpers import JSON_MIME, make_json
from vocab_import.db.word_store import InMemoryWordStore
from vocab_import.files.decoder import DecodeError
from vocab_import.logging.error_log import ErrorLogBuffer
from vocab_import.services.orchestrator import run_import

"""Error log JSON Lines contract (contracts/error_log_schema.json)."""

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "contracts" / "error_log_schema.json"


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def _lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_validation_failures_logged_per_row(tmp_path: Path, schema):
    log = ErrorLogBuffer(logs_dir=tmp_path)
    items = [{"word": "apple", "meaning": "苹果"}, {"meaning": "无词"}, {"word": "pear"}]
    run_import(make_json(items), JSON_MIME, "u1", InMemoryWordStore(), filename="list.json", error_log=log)
    lines = _lines(log.flush())
    for line in lines:
        jsonschema.validate(line, schema)
    assert [(d["row"], d["message"]) for d in lines] == [(2, "word required"), (3, "meaning required")]
    assert {d["file"] for d in lines} == {"list.json"}


def test_file_level_error_uses_row_minus_one(tmp_path: Path, schema):
    log = ErrorLogBuffer(logs_dir=tmp_path)
    with pytest.raises(DecodeError):
        run_import(b"{}", JSON_MIME, "u1", InMemoryWordStore(), error_log=log)
    (line,) = _lines(log.flush())
    jsonschema.validate(line, schema)
    assert line["row"] == -1
    assert line["file"] == "<upload>"
    assert line["error_type"] == "DECODE_ERROR"
