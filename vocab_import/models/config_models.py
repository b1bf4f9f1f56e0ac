from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the vocabulary import tool.

Populated by vocab_import.config.loader from config/import.yml; every key is
optional and falls back to the defaults below.
"""

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_CHUNK_SIZE = 50
DEFAULT_FAILURE_CAP = 100
DEFAULT_MEANING_LANGUAGE = "zh"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES  # decoder size limit
    chunk_size: int = DEFAULT_CHUNK_SIZE  # rows per persist transaction
    failure_cap: int = DEFAULT_FAILURE_CAP  # failures listed in the summary
    meaning_language: str = DEFAULT_MEANING_LANGUAGE  # language tag on meanings
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
