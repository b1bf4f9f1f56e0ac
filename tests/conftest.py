# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from vocab_import.db.word_store import InMemoryWordStore
from vocab_import.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def store() -> InMemoryWordStore:
    return InMemoryWordStore()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """max_file_size_bytes: 1048576
chunk_size: 2
failure_cap: 5
meaning_language: zh
database:
  host: localhost
  port: 5432
  user: dailyspark
  password: secret
  database: dailyspark
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
