"""Command line interface (``python -m vocab_import.cli``)."""

from .main import main

__all__ = ["main"]
