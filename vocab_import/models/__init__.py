"""Domain models for the vocabulary import pipeline.

RawRow -> (normalize) -> CanonicalRow -> ImportSummary, plus the config
dataclasses and the error log record.
"""

from .config_models import DatabaseConfig, ImportConfig
from .error_record import ErrorRecord
from .import_summary import ImportFailure, ImportSummary
from .row_data import CanonicalRow, Invalid, RawRow, Valid, ValidationOutcome

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    # Pipeline models
    "RawRow",
    "CanonicalRow",
    "Valid",
    "Invalid",
    "ValidationOutcome",
    # Results
    "ImportFailure",
    "ImportSummary",
    "ErrorRecord",
]
