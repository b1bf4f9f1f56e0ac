from __future__ import annotations

import pytest

from vocab_import.db.batch_insert import BatchInsertError
from vocab_import.db.word_store import InMemoryWordStore
from vocab_import.models.row_data import CanonicalRow
from vocab_import.services.persister import PersistError, chunked, persist


class FailingStore(InMemoryWordStore):
    """Raises on the given 1-based chunk index."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.attempts = 0

    def insert_chunk(self, rows, owner_id):
        self.attempts += 1
        if self.attempts == self.fail_on:
            raise BatchInsertError("could not serialize access")
        return super().insert_chunk(rows, owner_id)


def _rows(n: int) -> list[CanonicalRow]:
    return [CanonicalRow(word=f"w{i}", meaning="m") for i in range(n)]


def test_chunked_sizes():
    assert [len(c) for c in chunked(_rows(120), 50)] == [50, 50, 20]
    assert list(chunked([], 50)) == []


def test_chunked_rejects_non_positive():
    with pytest.raises(ValueError):
        list(chunked(_rows(1), 0))


def test_persist_all_chunks():
    store = InMemoryWordStore()
    seen = []
    result = persist(_rows(120), "u1", store, chunk_size=50, on_chunk=lambda i, n: seen.append((i, n)))
    assert result.success_count == 120
    assert result.chunks == 3
    assert seen == [(1, 50), (2, 50), (3, 20)]
    assert store.count("u1") == 120


def test_persist_empty():
    result = persist([], "u1", InMemoryWordStore())
    assert result.success_count == 0
    assert result.chunks == 0


def test_chunk_failure_boundary():
    store = FailingStore(fail_on=2)
    with pytest.raises(PersistError) as exc:
        persist(_rows(150), "u1", store, chunk_size=50)
    assert exc.value.success_count == 50
    assert exc.value.chunk_index == 2
    # chunk 3 never attempted, only chunk 1 persisted
    assert store.attempts == 2
    assert store.count("u1") == 50
    assert isinstance(exc.value.__cause__, BatchInsertError)


def test_first_chunk_failure():
    store = FailingStore(fail_on=1)
    with pytest.raises(PersistError) as exc:
        persist(_rows(10), None, store, chunk_size=50)
    assert exc.value.success_count == 0
    assert store.count(None) == 0
