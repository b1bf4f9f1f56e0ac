from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from ..db.batch_insert import StoreError
from ..db.word_store import WordStore
from ..models.row_data import CanonicalRow

"""Chunked transactional persistence.

Rows are written in fixed-size chunks, one transaction each, strictly one
after another. The first failing chunk stops the loop: earlier chunks stay
committed, the failing chunk is rolled back by the store, later chunks are
never attempted. The caller receives PersistError carrying the committed
count. There is no retry.
"""

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "PersistError",
    "PersistResult",
    "chunked",
    "persist",
]

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50


class PersistError(Exception):
    """A chunk could not be committed.

    Attributes:
        success_count: rows in fully committed chunks before the failure
        chunk_index: 1-based index of the failing chunk (0 when the failure
            happened before any chunk, e.g. reading existing words)
    """

    def __init__(self, message: str, success_count: int = 0, chunk_index: int = 0) -> None:
        super().__init__(message)
        self.success_count = success_count
        self.chunk_index = chunk_index


@dataclass(frozen=True)
class PersistResult:
    success_count: int
    chunks: int  # committed chunk count


def chunked(rows: Sequence[CanonicalRow], size: int) -> Iterator[Sequence[CanonicalRow]]:
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def persist(
    to_insert: Sequence[CanonicalRow],
    owner_id: str | None,
    store: WordStore,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_chunk: Callable[[int, int], None] | None = None,
) -> PersistResult:
    """Write rows chunk by chunk; raise PersistError on the first failed chunk.

    on_chunk(chunk_index, committed_rows) is called after each commit.
    """
    success_count = 0
    chunks = 0
    for index, chunk in enumerate(chunked(to_insert, chunk_size), start=1):
        started = time.perf_counter()
        try:
            committed = store.insert_chunk(chunk, owner_id)
        except StoreError as e:
            logger.error(
                "chunk=%d rows=%d failed after %d committed rows: %s",
                index,
                len(chunk),
                success_count,
                e,
            )
            raise PersistError(
                f"chunk {index} failed: {e}", success_count=success_count, chunk_index=index
            ) from e
        success_count += committed
        chunks += 1
        logger.debug(
            "chunk=%d rows=%d committed elapsed=%.4fs",
            index,
            committed,
            time.perf_counter() - started,
        )
        if on_chunk is not None:
            on_chunk(index, committed)
    return PersistResult(success_count=success_count, chunks=chunks)
