"""Upload decoding (spreadsheet / csv / json)."""

from .decoder import DecodeError, SourceFormat, check_size, decode, resolve_format

__all__ = ["DecodeError", "SourceFormat", "check_size", "decode", "resolve_format"]
