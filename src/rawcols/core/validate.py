"""Collection-level validation for raw column declarations.

`validate_raw_columns()` is the main entry point: it dispatches every raw
record in document order, then checks collection invariants. Validation is
all-or-nothing; the first failure is raised and no partial collection is
returned.

Collection invariants:
- column names are pairwise distinct (the first duplicate in encounter order
  is reported, so the same input always reports the same name)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from rawcols.core.dispatch import dispatch_raw_column
from rawcols.core.errors import RULE_TYPE, DuplicateNameError, RawColumnError
from rawcols.core.model import RawColumn, RawColumns
from rawcols.core.registry import RAW_COLUMN_VALIDATION, InterfaceStructValidation

logger = logging.getLogger(__name__)


def find_duplicate_names(names: Iterable[str]) -> list[str]:
    """Return names seen more than once, in order of their second occurrence."""
    seen: set[str] = set()
    reported: set[str] = set()
    dups: list[str] = []
    for n in names:
        if n in seen and n not in reported:
            dups.append(n)
            reported.add(n)
        seen.add(n)
    return dups


def validate_raw_column_names(columns: Sequence[RawColumn]) -> None:
    """Raise `DuplicateNameError` for the first name declared twice."""
    names = [c.name for c in columns]
    dups = find_duplicate_names(names)
    if dups:
        name = dups[0]
        second = names.index(name, names.index(name) + 1)
        raise DuplicateNameError(name, columns[second].resource_type, index=second)


def validate_raw_columns(
    records: Any,
    registry: InterfaceStructValidation = RAW_COLUMN_VALIDATION,
) -> RawColumns:
    """Validate a raw document (list of records) and return `RawColumns`.

    Raises:
        RawColumnError: the first discriminator, field, or duplicate-name
            failure encountered.
    """
    if isinstance(records, (str, bytes)) or not isinstance(records, (list, tuple)):
        raise RawColumnError(f"expected a list of column records, got {type(records).__name__}", rule=RULE_TYPE)

    columns = [dispatch_raw_column(r, registry, index=i) for i, r in enumerate(records)]
    out = RawColumns(columns)
    out.validate()

    logger.debug("validated %d raw columns: %s", len(out), out.names())
    return out


__all__ = [
    "find_duplicate_names",
    "validate_raw_column_names",
    "validate_raw_columns",
]
