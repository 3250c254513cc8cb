"""rawcols I/O helpers.

Document decoding lives in [`read_raw_columns()`](document.py:1).
"""

from __future__ import annotations

from .document import extract_records, load_document, parse_document_text, read_raw_columns

__all__ = [
    "extract_records",
    "load_document",
    "parse_document_text",
    "read_raw_columns",
]
