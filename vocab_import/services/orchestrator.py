from __future__ import annotations

import logging
import mimetypes
import time
from pathlib import Path

from ..db.batch_insert import StoreError
from ..db.word_store import WordStore
from ..files.decoder import DecodeError, check_size, decode
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig
from ..models.error_record import FILE_LEVEL_ROW, ErrorRecord
from ..models.import_summary import ImportFailure, ImportSummary
from .deduplicator import dedupe
from .normalizer import normalize
from .persister import PersistError, persist
from .progress import ChunkProgress
from .summary import summarize
from .validator import validate_rows

"""Import orchestration.

Runs one upload through the pipeline, strictly in order:

    decode -> normalize -> validate -> dedupe -> persist -> summarize

DecodeError and PersistError are fatal and propagate to the caller after
being recorded in the error log. Row validation failures and duplicates are
never fatal; they are counted in the returned ImportSummary.
"""

__all__ = [
    "run_import",
    "import_file",
]

logger = logging.getLogger(__name__)

UNNAMED_UPLOAD = "<upload>"


def run_import(
    payload: bytes,
    mime_type: str | None,
    owner_id: str | None,
    store: WordStore,
    config: ImportConfig | None = None,
    filename: str | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ImportSummary:
    """Import one uploaded word list for owner_id.

    Args:
        payload: raw upload bytes
        mime_type: declared MIME type (the file name extension is the fallback)
        owner_id: authenticated caller; None imports as the system owner
        store: read / write collaborator for words
        config: limits and chunking (defaults when omitted)
        filename: original file name, used for format fallback and logs
        error_log: buffer receiving one record per failure; the caller flushes

    Raises:
        DecodeError: oversized, empty or unparseable upload (nothing processed)
        PersistError: storage failure; carries the committed row count
    """
    config = config or ImportConfig()
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_label = filename or UNNAMED_UPLOAD
    started = time.perf_counter()

    try:
        raw_rows = decode(payload, mime_type, filename, max_bytes=config.max_file_size_bytes)
    except DecodeError as e:
        logger.error("decode: file=%s %s", file_label, e)
        error_log.append(ErrorRecord.create(file_label, FILE_LEVEL_ROW, "DECODE_ERROR", str(e)))
        raise
    logger.info("decoded file=%s rows=%d", file_label, len(raw_rows))

    valid, invalid = validate_rows([(raw, normalize(raw)) for raw in raw_rows])
    failures = [
        ImportFailure(row=i.row_number, reason=i.reason, data=dict(i.raw.values)) for i in invalid
    ]
    for f in failures:
        error_log.append(ErrorRecord.create(file_label, f.row, "VALIDATION_ERROR", f.reason))
    if failures:
        logger.warning("file=%s invalid_rows=%d", file_label, len(failures))

    # 既存単語は 1 回だけ取得 (行ごとの問い合わせはしない)
    try:
        existing = store.fetch_existing_words(owner_id)
    except StoreError as e:
        logger.error("persist: file=%s %s", file_label, e)
        error_log.append(ErrorRecord.create(file_label, FILE_LEVEL_ROW, "PERSIST_ERROR", str(e)))
        raise PersistError(str(e)) from e

    deduped = dedupe((v.row for v in valid), existing)
    logger.debug(
        "file=%s valid=%d existing=%d to_insert=%d duplicates=%d",
        file_label,
        len(valid),
        len(existing),
        len(deduped.to_insert),
        deduped.duplicate_count,
    )

    with ChunkProgress(len(deduped.to_insert)) as progress:
        try:
            result = persist(
                deduped.to_insert,
                owner_id,
                store,
                chunk_size=config.chunk_size,
                on_chunk=progress.advance,
            )
        except PersistError as e:
            error_log.append(
                ErrorRecord.create(file_label, FILE_LEVEL_ROW, "PERSIST_ERROR", str(e))
            )
            raise

    summary = summarize(
        total_rows=len(raw_rows),
        imported_count=result.success_count,
        duplicate_count=deduped.duplicate_count,
        failures=failures,
        failure_cap=config.failure_cap,
        elapsed_seconds=time.perf_counter() - started,
    )
    logger.info(
        "file=%s owner=%s imported=%d chunks=%d",
        file_label,
        owner_id if owner_id is not None else "<system>",
        result.success_count,
        result.chunks,
    )
    return summary


def import_file(
    path: Path,
    owner_id: str | None,
    store: WordStore,
    config: ImportConfig | None = None,
    mime_type: str | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ImportSummary:
    """Read a word list from disk and import it (MIME guessed from the name)."""
    config = config or ImportConfig()
    try:
        if not path.is_file():
            raise DecodeError(f"file not found: {path}")
        # 読み込み前にディスク上のサイズで上限判定
        check_size(path.stat().st_size, config.max_file_size_bytes)
    except DecodeError as e:
        logger.error("decode: file=%s %s", path.name, e)
        if error_log is not None:
            error_log.append(ErrorRecord.create(path.name, FILE_LEVEL_ROW, "DECODE_ERROR", str(e)))
        raise
    mime = mime_type or mimetypes.guess_type(path.name)[0]
    return run_import(
        path.read_bytes(),
        mime,
        owner_id,
        store,
        config=config,
        filename=path.name,
        error_log=error_log,
    )
