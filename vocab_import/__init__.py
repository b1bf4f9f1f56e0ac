"""Bulk vocabulary import pipeline for DailySpark.

Decode an uploaded word list (xlsx / csv / json), normalize bilingual column
labels, validate, deduplicate against the owner's existing words and persist
in chunked transactions.
"""

__version__ = "0.3.0"
