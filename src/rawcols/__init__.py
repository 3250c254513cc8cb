"""rawcols: validation of raw column declarations.

Raw column documents (YAML/JSON) are dispatched by their `type` tag into typed
column variants, validated field by field, and checked as a collection.
"""

from __future__ import annotations

from rawcols.core import (
    FloatColumn,
    IntColumn,
    RawColumn,
    RawColumnError,
    RawColumns,
    StringColumn,
    dispatch_raw_column,
    validate_raw_columns,
)
from rawcols.io import read_raw_columns

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "FloatColumn",
    "IntColumn",
    "RawColumn",
    "RawColumnError",
    "RawColumns",
    "StringColumn",
    "dispatch_raw_column",
    "read_raw_columns",
    "validate_raw_columns",
]
