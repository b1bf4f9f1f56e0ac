from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Chunk progress display with tqdm (TTY only).

Non-TTY output (CI, piped CLI runs, tests) gets no bar at all to avoid
ANSI control sequence spam in logs.
"""

__all__ = [
    "ChunkProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ChunkProgress:
    """Progress bar over rows to persist, advanced once per committed chunk."""

    def __init__(self, total_rows: int, *, description: str = "Importing words") -> None:
        self.total_rows = total_rows
        self.description = description
        self.committed_rows = 0
        self.enabled = is_tty_enabled() and total_rows > 0
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="word",
                leave=True,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, chunk_index: int, committed: int) -> None:
        """Callback for persist(): one committed chunk."""
        self.committed_rows += committed
        if self.pbar is not None:
            self.pbar.update(committed)
            self.pbar.set_postfix(chunk=chunk_index)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ChunkProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
