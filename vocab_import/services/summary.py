from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.import_summary import ImportFailure, ImportSummary

"""Result reporter: aggregate counts and render the SUMMARY line.

The failure list handed to the caller is capped (display concern only);
failed_count always reports the true number of rejected rows.
"""

DEFAULT_FAILURE_CAP = 100


def summarize(
    total_rows: int,
    imported_count: int,
    duplicate_count: int,
    failures: Sequence[ImportFailure],
    failure_cap: int = DEFAULT_FAILURE_CAP,
    elapsed_seconds: float = 0.0,
) -> ImportSummary:
    """Build the immutable ImportSummary for one run."""
    return ImportSummary(
        total_rows=total_rows,
        imported_count=imported_count,
        duplicate_count=duplicate_count,
        failed_count=len(failures),
        failures=tuple(failures[:max(failure_cap, 0)]),
        elapsed_seconds=elapsed_seconds,
    )


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_body(summary: ImportSummary) -> str:
    """Counts part of the SUMMARY line (no label; log_summary adds it)."""
    return (
        f"total={summary.total_rows} "
        f"imported={summary.imported_count} "
        f"duplicates={summary.duplicate_count} "
        f"failed={summary.failed_count} "
        f"elapsed_sec={_format_number(summary.elapsed_seconds)}"
    )


def render_summary_line(summary: ImportSummary) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY total={n} imported={n} duplicates={n} failed={n} elapsed_sec={x}

    Examples:
        >>> s = ImportSummary(total_rows=3, imported_count=1, duplicate_count=1,
        ...                   failed_count=1, elapsed_seconds=2.0)
        >>> render_summary_line(s)
        'SUMMARY total=3 imported=1 duplicates=1 failed=1 elapsed_sec=2'
    """
    return f"SUMMARY {render_summary_body(summary)}"


def error_response(exc: BaseException) -> dict[str, Any]:
    """All-or-nothing body for a run that did not produce a summary."""
    body: dict[str, Any] = {"success": False, "error": f"Import failed: {exc}"}
    committed = getattr(exc, "success_count", None)
    if committed:
        body["imported"] = committed
    return body
