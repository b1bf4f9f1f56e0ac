from __future__ import annotations

import json
from pathlib import Path

from tests.helpers import make_json, make_xlsx, word_items
from vocab_import.cli import main as cli_main


def test_cli_dry_run_success(temp_workdir: Path, capsys):
    path = temp_workdir / "data" / "words.json"
    path.write_bytes(make_json(word_items(3)))
    code = cli_main([str(path), "--owner-id", "u1", "--dry-run"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY total=3 imported=3 duplicates=0 failed=0" in out
    assert not (temp_workdir / "logs").exists()


def test_cli_dry_run_partial_failure_json(temp_workdir: Path, capsys):
    path = temp_workdir / "data" / "words.xlsx"
    path.write_bytes(make_xlsx([["word", "meaning"], ["apple", "苹果"], ["", "空"]]))
    code = cli_main([str(path), "--dry-run", "--json"])
    out = capsys.readouterr().out
    assert code == 2
    body = json.loads(out.strip().splitlines()[-1])
    assert body["imported"] == 1
    assert body["failed"] == 1
    assert body["errors"][0]["row"] == 2
    # row failures are also written to the error log
    assert len(list((temp_workdir / "logs").glob("errors-*.log"))) == 1


def test_cli_decode_error_is_fatal(temp_workdir: Path, capsys):
    path = temp_workdir / "data" / "words.json"
    path.write_bytes(b'{"word": "apple"}')
    code = cli_main([str(path), "--dry-run", "--json"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR import: JSON content must be an array of words" in out
    body = json.loads(out.strip().splitlines()[-1])
    assert body == {"success": False, "error": "Import failed: JSON content must be an array of words"}


def test_cli_config_error(write_config: Path, temp_workdir: Path, capsys):
    write_config.write_text("chunk_size: -1\n", encoding="utf-8")
    path = temp_workdir / "data" / "words.json"
    path.write_bytes(make_json(word_items(1)))
    code = cli_main([str(path), "--dry-run"])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_cli_uses_config_chunk_size(write_config: Path, temp_workdir: Path, capsys):
    path = temp_workdir / "data" / "words.json"
    path.write_bytes(make_json(word_items(5)))
    code = cli_main([str(path), "--dry-run", "--debug"])
    out = capsys.readouterr().out
    assert code == 0
    # chunk_size: 2 in the sample config -> 3 chunks
    assert "chunks=3" in out
    assert "DEBUG chunk=3 rows=1 committed" in out
