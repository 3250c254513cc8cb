"""Raw column document I/O.

Decodes a YAML or JSON document into raw records and hands them to the core
validator. Supported top-level shapes:

  - a list of column records:
      [{"name": "age", "type": "INT_COLUMN", "min": 0}, ...]
  - an object with a single `raw_columns` list:
      {"raw_columns": [...]}

Format is selected by file suffix: `.json` uses the stdlib decoder, `.yaml` /
`.yml` use `yaml.safe_load`. Both keep "absent key" distinguishable from
"present with null", which field validation relies on.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from rawcols.core.errors import DocumentError
from rawcols.core.model import RawColumns
from rawcols.core.validate import validate_raw_columns

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")

DOCUMENT_KEY = "raw_columns"


def parse_document_text(text: str, *, fmt: str, where: str = "<string>") -> Any:
    """Decode document text; `fmt` is "json" or "yaml"."""
    if fmt == "json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"invalid JSON: {e}", path=where) from e
    if fmt == "yaml":
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentError(f"invalid YAML: {e}", path=where) from e
    raise ValueError(f"unsupported document format: {fmt!r}")


def _format_for(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        return "json"
    if suffix in YAML_SUFFIXES:
        return "yaml"
    raise DocumentError(
        f"unsupported file extension {suffix!r} (expected one of {list(JSON_SUFFIXES + YAML_SUFFIXES)})",
        path=str(path),
    )


def load_document(path: str | Path) -> Any:
    """Read and decode a document file without validating it."""
    p = Path(path)
    fmt = _format_for(p)
    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentError(f"not valid UTF-8: {e}", path=str(p)) from e
    except OSError as e:
        raise DocumentError(f"cannot read file: {e.strerror or e}", path=str(p)) from e
    return parse_document_text(text, fmt=fmt, where=str(p))


def extract_records(doc: Any, *, where: str = "<document>") -> list[Any]:
    """Return the list of raw column records from a decoded document."""
    if doc is None:
        return []
    if isinstance(doc, list):
        return doc
    if isinstance(doc, dict):
        extras = [k for k in doc if k != DOCUMENT_KEY]
        if extras:
            raise DocumentError(f"unexpected top-level keys: {extras}", path=where)
        records = doc.get(DOCUMENT_KEY)
        if records is None:
            return []
        if not isinstance(records, list):
            raise DocumentError(
                f"{DOCUMENT_KEY}: expected a list, got {type(records).__name__}", path=where
            )
        return records
    raise DocumentError(
        f"expected a list of column records or an object with '{DOCUMENT_KEY}', got {type(doc).__name__}",
        path=where,
    )


def read_raw_columns(path: str | Path) -> RawColumns:
    """Read, decode, and validate a raw column document.

    Raises:
        DocumentError: the file cannot be decoded or has the wrong shape.
        RawColumnError: any record or collection violation (first one wins).
    """
    p = Path(path)
    records = extract_records(load_document(p), where=str(p))
    columns = validate_raw_columns(records)
    logger.info("loaded %d raw columns from %s", len(columns), p)
    return columns


__all__ = [
    "DOCUMENT_KEY",
    "extract_records",
    "load_document",
    "parse_document_text",
    "read_raw_columns",
]
