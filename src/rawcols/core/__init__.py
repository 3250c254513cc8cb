"""rawcols core: column model, field validation, dispatch, collection checks.

This package is standalone and must not import io/cli to avoid circular
dependencies.
"""

from __future__ import annotations

from .dispatch import dispatch_raw_column
from .errors import (
    DiscriminatorError,
    DocumentError,
    DuplicateNameError,
    FieldValidationError,
    RawColumnError,
)
from .model import (
    COLUMN_TYPES,
    FloatColumn,
    IntColumn,
    RawColumn,
    RawColumns,
    ResourceType,
    SparkCompute,
    StringColumn,
)
from .registry import RAW_COLUMN_VALIDATION, InterfaceStructValidation, VariantType
from .tables import SUMMARY_COLUMN_ORDER, SUMMARY_SCHEMA, raw_columns_to_frame, write_summary_csv
from .validate import validate_raw_column_names, validate_raw_columns

__all__ = [
    "COLUMN_TYPES",
    "FloatColumn",
    "IntColumn",
    "RawColumn",
    "RawColumns",
    "ResourceType",
    "SparkCompute",
    "StringColumn",
    "RAW_COLUMN_VALIDATION",
    "InterfaceStructValidation",
    "VariantType",
    "dispatch_raw_column",
    "validate_raw_column_names",
    "validate_raw_columns",
    "DiscriminatorError",
    "DocumentError",
    "DuplicateNameError",
    "FieldValidationError",
    "RawColumnError",
    "SUMMARY_SCHEMA",
    "SUMMARY_COLUMN_ORDER",
    "raw_columns_to_frame",
    "write_summary_csv",
]
