from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from vocab_import.config.loader import ConfigError, load_config_or_default
from vocab_import.db.connection import db_connection
from vocab_import.db.word_store import InMemoryWordStore, PostgresWordStore
from vocab_import.files.decoder import DecodeError
from vocab_import.logging.error_log import ErrorLogBuffer
from vocab_import.logging.init import log_summary, setup_logging
from vocab_import.services.orchestrator import import_file
from vocab_import.services.persister import PersistError
from vocab_import.services.summary import error_response, render_summary_body

"""CLI entrypoint.

Flow:
- Load .env and config
- Import one word list file for one owner (PostgreSQL, or in-memory with --dry-run)
- Log the SUMMARY line, optionally print the JSON response body, flush the error log

Exit codes: 0 every row imported or skipped as duplicate, 2 some rows
failed validation, 1 fatal (config / decode / database).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv so its DB settings win over the shell's."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="DailySpark vocabulary bulk importer")
    p.add_argument("file", type=Path, help="Word list (.xlsx, .csv or .json)")
    p.add_argument("--owner-id", default=None, help="Owning user id (omit for system words)")
    p.add_argument("--mime-type", default=None, help="Declared MIME type (default: guessed from name)")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/import.yml)")
    p.add_argument("--dry-run", action="store_true", help="Use an in-memory store, touch no database")
    p.add_argument("--json", action="store_true", help="Print the response body as JSON")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで [] を渡すケースのため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config_or_default(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    try:
        if args.dry_run:
            logger.info(f"dry run: importing {args.file} into in-memory store")
            store = InMemoryWordStore(language=cfg.meaning_language)
            summary = import_file(
                args.file, args.owner_id, store, cfg, mime_type=args.mime_type, error_log=error_log
            )
        else:
            with db_connection(cfg.database) as conn:
                store = PostgresWordStore(conn, language=cfg.meaning_language)
                summary = import_file(
                    args.file, args.owner_id, store, cfg, mime_type=args.mime_type, error_log=error_log
                )
    except (DecodeError, PersistError) as e:
        logger.error(f"import: {e}")
        if args.json:
            print(json.dumps(error_response(e), ensure_ascii=False))
        return EXIT_FATAL
    except psycopg2.Error as e:
        # psycopg2.connect などの接続失敗
        logger.error(f"database: {e}")
        if args.json:
            print(json.dumps(error_response(e), ensure_ascii=False))
        return EXIT_FATAL
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    log_summary(render_summary_body(summary))
    if summary.truncated:
        logger.warning(
            f"{summary.failed_count} rows failed, only the first {len(summary.failures)} are listed"
        )
    if args.json:
        print(json.dumps(summary.to_response(), ensure_ascii=False, default=str))

    return EXIT_PARTIAL_FAILURE if summary.failed_count > 0 else EXIT_SUCCESS_ALL
