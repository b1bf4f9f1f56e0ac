from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

"""DB batch insert helper.

Multi-row INSERT through psycopg2.extras.execute_values. One call issues one
statement per page (page_size rows), so a chunk of words, meanings or
examples goes to the server as a single bounded round trip. Driver errors
are wrapped in BatchInsertError; transaction control is the caller's.
"""

__all__ = [
    "StoreError",
    "BatchInsertError",
    "BatchMetrics",
    "InsertResult",
    "batch_insert",
]


class StoreError(Exception):
    """Any storage failure (read or write)."""


class BatchInsertError(StoreError):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing data for a single batch insert call."""
    table: str
    batch_size: int  # Number of rows in this batch
    elapsed_seconds: float  # Time spent on execute_values call
    start_time: float  # time.time() at start
    end_time: float  # time.time() at end


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    returned_values: list[tuple[Any, ...]] | None = None


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    returning: Sequence[str] | None = None,
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Perform a batched INSERT using psycopg2.extras.execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor (transaction already open)
    table: target table name (trusted, not user input)
    columns: insert columns
    rows: row value sequences, same order as columns
    returning: columns for a RETURNING clause; values come back in row order
    page_size: rows per generated statement
    metrics_callback: receives BatchMetrics after the call (not invoked for
        empty input)
    """
    rows_list = [tuple(r) for r in rows]
    if not rows_list:
        return InsertResult(inserted_rows=0, returned_values=[] if returning else None)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    if returning:
        sql += " RETURNING " + ",".join(f'"{c}"' for c in returning)

    start_time = time.time()
    try:
        returned = execute_values(
            cursor, sql, rows_list, page_size=page_size, fetch=bool(returning)
        )
    except Exception as e:
        raise BatchInsertError(f"insert into {table} failed: {e}") from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    table=table,
                    batch_size=len(rows_list),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )

    if returning:
        returned_list = [tuple(r) for r in (returned or [])]
        if len(returned_list) != len(rows_list):
            raise BatchInsertError(
                f"insert into {table} returned {len(returned_list)} rows, expected {len(rows_list)}"
            )
        return InsertResult(inserted_rows=len(rows_list), returned_values=returned_list)
    return InsertResult(inserted_rows=len(rows_list))
