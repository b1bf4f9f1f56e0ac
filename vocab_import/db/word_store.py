from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import psycopg2

from ..models.row_data import CanonicalRow
from .batch_insert import BatchInsertError, BatchMetrics, StoreError, batch_insert

"""Word persistence collaborators.

A store answers two questions for the pipeline: which words does this owner
already have (one query per run), and "commit this chunk atomically". The
PostgreSQL store writes words / word_meanings / word_examples (see
sql/schema.sql); the in-memory store mirrors its uniqueness rule and backs
dry runs and tests.

owner_id None is the "system" owner (user_id IS NULL).
"""

__all__ = [
    "WordStore",
    "PostgresWordStore",
    "InMemoryWordStore",
    "StoredWord",
]

WORD_COLUMNS = ("user_id", "word", "phonetic", "part_of_speech", "level")
MEANING_COLUMNS = ("word_id", "definition", "language")
EXAMPLE_COLUMNS = ("word_id", "sentence", "translation")


class WordStore(Protocol):
    def fetch_existing_words(self, owner_id: str | None) -> set[str]: ...

    def insert_chunk(self, rows: Sequence[CanonicalRow], owner_id: str | None) -> int: ...


class PostgresWordStore:
    """psycopg2 backed store; one transaction per insert_chunk call."""

    def __init__(
        self,
        connection: Any,
        language: str = "zh",
        metrics_callback: Callable[[BatchMetrics], None] | None = None,
    ) -> None:
        self.connection = connection
        self.language = language
        self.metrics_callback = metrics_callback

    def fetch_existing_words(self, owner_id: str | None) -> set[str]:
        try:
            with self.connection:
                with self.connection.cursor() as cur:
                    cur.execute(
                        "SELECT word FROM words WHERE user_id IS NOT DISTINCT FROM %s",
                        (owner_id,),
                    )
                    return {r[0] for r in cur.fetchall()}
        except psycopg2.Error as e:
            raise StoreError(f"failed to load existing words: {e}") from e

    def insert_chunk(self, rows: Sequence[CanonicalRow], owner_id: str | None) -> int:
        """Insert words plus their meaning / example children in one transaction.

        `with connection` commits on success and rolls back when anything in
        the block raises, so a failed chunk leaves no partial rows behind.
        """
        if not rows:
            return 0
        try:
            with self.connection:
                with self.connection.cursor() as cur:
                    inserted = batch_insert(
                        cur,
                        "words",
                        WORD_COLUMNS,
                        [(owner_id, r.word, r.phonetic, r.part_of_speech, r.level) for r in rows],
                        returning=("id",),
                        metrics_callback=self.metrics_callback,
                    )
                    word_ids = [v[0] for v in inserted.returned_values or []]
                    batch_insert(
                        cur,
                        "word_meanings",
                        MEANING_COLUMNS,
                        [(wid, r.meaning, self.language) for wid, r in zip(word_ids, rows, strict=True)],
                        metrics_callback=self.metrics_callback,
                    )
                    batch_insert(
                        cur,
                        "word_examples",
                        EXAMPLE_COLUMNS,
                        [
                            (wid, r.example_en, r.example_cn)
                            for wid, r in zip(word_ids, rows, strict=True)
                            if r.example_en
                        ],
                        metrics_callback=self.metrics_callback,
                    )
        except psycopg2.Error as e:
            # commit 失敗など batch_insert 外のドライバ例外
            raise BatchInsertError(f"chunk commit failed: {e}") from e
        return len(rows)


@dataclass
class StoredWord:
    id: int
    owner_id: str | None
    word: str
    phonetic: str | None = None
    part_of_speech: str | None = None
    level: str | None = None
    meanings: list[tuple[str, str]] = field(default_factory=list)  # (definition, language)
    examples: list[tuple[str, str | None]] = field(default_factory=list)  # (sentence, translation)


class InMemoryWordStore:
    """Dict backed store with the same (owner, lower(word)) uniqueness rule."""

    def __init__(self, language: str = "zh") -> None:
        self.language = language
        self.words: dict[tuple[str | None, str], StoredWord] = {}
        self.chunks_committed = 0
        self._next_id = 1

    def add_existing(self, owner_id: str | None, *words: str) -> None:
        """Seed words the owner already has (test / dry-run helper)."""
        for w in words:
            self._store(CanonicalRow(word=w, meaning=""), owner_id, with_children=False)

    def fetch_existing_words(self, owner_id: str | None) -> set[str]:
        return {sw.word for (owner, _), sw in self.words.items() if owner == owner_id}

    def count(self, owner_id: str | None) -> int:
        return sum(1 for owner, _ in self.words if owner == owner_id)

    def insert_chunk(self, rows: Sequence[CanonicalRow], owner_id: str | None) -> int:
        # 全行を事前検査してから書き込む (チャンク単位の原子性)
        keys = [(owner_id, r.key) for r in rows]
        clash = [k[1] for k in keys if k in self.words]
        if clash or len(set(keys)) != len(keys):
            raise BatchInsertError(
                f"duplicate key value violates unique constraint words_user_id_word_key: {clash or keys}"
            )
        for row in rows:
            self._store(row, owner_id, with_children=True)
        self.chunks_committed += 1
        return len(rows)

    def _store(self, row: CanonicalRow, owner_id: str | None, *, with_children: bool) -> None:
        stored = StoredWord(
            id=self._next_id,
            owner_id=owner_id,
            word=row.word,
            phonetic=row.phonetic,
            part_of_speech=row.part_of_speech,
            level=row.level,
        )
        if with_children:
            stored.meanings.append((row.meaning, self.language))
            if row.example_en:
                stored.examples.append((row.example_en, row.example_cn))
        self.words[(owner_id, row.key)] = stored
        self._next_id += 1
