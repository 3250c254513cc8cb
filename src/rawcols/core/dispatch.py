"""Variant dispatch: raw record -> typed `RawColumn`.

Algorithm:
1. read the discriminator (`type`); missing or unregistered values fail
2. reject keys the matched variant does not declare
3. run the variant's field validations in order (first failure wins)
4. construct the frozen variant from the validated fields

Errors are tagged with the record index and, when the raw `name` is a string,
the column name so callers can report precisely which input failed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rawcols.core.errors import (
    RULE_MISSING_TYPE,
    RULE_TYPE,
    RULE_UNKNOWN_TYPE,
    DiscriminatorError,
    RawColumnError,
)
from rawcols.core.fields import validate_fields
from rawcols.core.model import RawColumn
from rawcols.core.registry import RAW_COLUMN_VALIDATION, InterfaceStructValidation, VariantType

logger = logging.getLogger(__name__)


def _read_discriminator(record: Mapping[Any, Any], registry: InterfaceStructValidation) -> VariantType:
    key = registry.type_key
    type_str = record.get(key)
    if type_str is None:
        raise DiscriminatorError(
            f"missing type (valid types: {registry.type_names()})", key=key, rule=RULE_MISSING_TYPE
        )
    variant = registry.lookup(type_str) if isinstance(type_str, str) else None
    if variant is None:
        raise DiscriminatorError(
            f"unknown type {type_str!r} (valid types: {registry.type_names()})",
            key=key,
            rule=RULE_UNKNOWN_TYPE,
        )
    return variant


def dispatch_raw_column(
    record: Any,
    registry: InterfaceStructValidation = RAW_COLUMN_VALIDATION,
    *,
    index: int | None = None,
) -> RawColumn:
    """Validate one raw record and return the matching typed variant.

    Raises:
        DiscriminatorError: the type tag is missing or unknown.
        FieldValidationError: a field violates its constraint.
    """
    if not isinstance(record, Mapping):
        raise DiscriminatorError(
            f"expected a map, got {type(record).__name__}", rule=RULE_TYPE, index=index
        )

    raw_name = record.get("name")
    column = raw_name if isinstance(raw_name, str) else None

    try:
        variant = _read_discriminator(record, registry)
        kwargs = validate_fields(record, variant.fields)
        out = variant.cls(**kwargs)
    except RawColumnError as e:
        e.with_context(index=index, column=column)
        logger.debug("raw column rejected: %s", e)
        raise

    logger.debug("dispatched %s %r", out.type, out.name)
    return out


__all__ = ["dispatch_raw_column"]
