"""Canonical tabular summary of a raw column collection.

A validated `RawColumns` is rendered as one pandas DataFrame row per column,
in declaration order (no sorting: document order is meaningful). The table is
built only from the capability interface (`RawColumn.summary()`), never from
concrete variant types.

Columns and logical dtypes are defined once in `SUMMARY_SCHEMA`; pandas
nullable extension dtypes preserve missing cells as <NA>. Bounds are kept as
exact text so 64-bit integer bounds round-trip without float rounding.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

from rawcols.core.model import RawColumn

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd


SUMMARY_SCHEMA: dict[str, str] = {
    "name": "string",
    "type": "string",
    "required": "boolean",
    "min": "string",
    "max": "string",
    "values": "string",
    "has_compute": "boolean",
    "tags": "string",
}

SUMMARY_COLUMN_ORDER: list[str] = list(SUMMARY_SCHEMA.keys())


def _json_or_none(value: Any) -> str | None:
    # Stable text form for list/map cells so the table survives CSV export.
    if value is None:
        return None
    return json.dumps(value, sort_keys=True)


def _bound_or_none(value: Any) -> str | None:
    # Exact text: int64 bounds above 2**53 do not survive a float column.
    if value is None:
        return None
    return repr(value) if isinstance(value, float) else str(value)


def _summary_row(column: RawColumn) -> dict[str, Any]:
    row = column.summary()
    row["min"] = _bound_or_none(row["min"])
    row["max"] = _bound_or_none(row["max"])
    row["values"] = _json_or_none(row["values"])
    row["tags"] = _json_or_none(row["tags"])
    return row


def raw_columns_to_frame(columns: Iterable[RawColumn]) -> "pd.DataFrame":
    """Return the canonical summary DataFrame for `columns`.

    Post-conditions:
    - columns are exactly `SUMMARY_COLUMN_ORDER`
    - dtypes follow `SUMMARY_SCHEMA`
    - row order equals input order, index is a RangeIndex
    """
    import pandas as pd

    rows = [_summary_row(c) for c in columns]
    df = pd.DataFrame(rows, columns=SUMMARY_COLUMN_ORDER)
    for col, dtype in SUMMARY_SCHEMA.items():
        df[col] = df[col].astype(dtype)
    return df.reset_index(drop=True)


def write_summary_csv(columns: Iterable[RawColumn], path: str | Path) -> None:
    """Write the summary table as UTF-8 CSV (newline-terminated, no index)."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    raw_columns_to_frame(columns).to_csv(p, index=False, lineterminator="\n")


__all__ = [
    "SUMMARY_COLUMN_ORDER",
    "SUMMARY_SCHEMA",
    "raw_columns_to_frame",
    "write_summary_csv",
]
