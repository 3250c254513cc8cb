"""Declarative per-field validation.

A field validation is a small frozen dataclass describing the constraints on
one key of a raw record (a mapping decoded from YAML/JSON). Each exposes

    validate(value, *, key, resolved) -> coerced value

where `value` is the raw value or `MISSING` when the key is absent, and
`resolved` is a read-only view of sibling fields already validated in the same
record (used for paired bounds such as `min`/`max`). Validators are pure and
raise `FieldValidationError` on the first violation.

Absent vs null is significant:
- absent key -> `required` check, then the declared default
- explicit null -> accepted only where `allow_null` (pointer/list semantics)

For list validations a null (or absent) list means "no restriction" and is
returned as `None`; an empty list is returned as `()` and means "no value is
allowed". The two must never be conflated.

`validate_fields()` runs an ordered list of `FieldValidation` entries over a
record and is shared by the variant dispatcher and `StructValidation`.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable

import numpy as np

from rawcols.core.errors import (
    RULE_ALLOWED_VALUES,
    RULE_EMPTY,
    RULE_MIN_EXCEEDS_MAX,
    RULE_NOT_NULL,
    RULE_PATTERN,
    RULE_RANGE,
    RULE_REQUIRED,
    RULE_TYPE,
    RULE_UNSUPPORTED_KEY,
    FieldValidationError,
    RawColumnError,
)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

ALPHANUMERIC_DASH_UNDERSCORE = re.compile(r"[A-Za-z0-9_-]+")

_INT_RANGES: dict[int, tuple[int, int]] = {
    32: (-(2**31), 2**31 - 1),
    64: (-(2**63), 2**63 - 1),
}
_FLOAT32_MAX = float(np.finfo(np.float32).max)

_EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


# ----------------------------
# Scalar coercion
# ----------------------------


def coerce_int(value: Any, *, key: str, bits: int = 64) -> int:
    """Coerce an integer of the given bit width; integral floats are accepted."""
    # bool is a subclass of int; a YAML `true` is never a valid integer.
    if isinstance(value, bool):
        raise FieldValidationError(key, RULE_TYPE, f"expected an integer, got {_type_name(value)}")
    if isinstance(value, (int, np.integer)):
        out = int(value)
    elif isinstance(value, (float, np.floating)) and math.isfinite(value) and float(value).is_integer():
        out = int(value)
    else:
        raise FieldValidationError(key, RULE_TYPE, f"expected an integer, got {_type_name(value)}")
    lo, hi = _INT_RANGES[bits]
    if not lo <= out <= hi:
        raise FieldValidationError(key, RULE_RANGE, f"{out} does not fit in a {bits}-bit integer")
    return out


def coerce_float(value: Any, *, key: str, bits: int = 32) -> float:
    """Coerce a finite number, rounding to float32 when `bits == 32`."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise FieldValidationError(key, RULE_TYPE, f"expected a number, got {_type_name(value)}")
    out = float(value)
    if not math.isfinite(out):
        raise FieldValidationError(key, RULE_RANGE, f"{out} is not a finite number")
    if bits == 32:
        if abs(out) > _FLOAT32_MAX:
            raise FieldValidationError(key, RULE_RANGE, f"{out} does not fit in a 32-bit float")
        out = float(np.float32(out))
    return out


def coerce_str(value: Any, *, key: str) -> str:
    if not isinstance(value, str):
        raise FieldValidationError(key, RULE_TYPE, f"expected a string, got {_type_name(value)}")
    return value


def _require_list(value: Any, *, key: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise FieldValidationError(key, RULE_TYPE, f"expected a list, got {_type_name(value)}")
    return list(value)


def _require_mapping(value: Any, *, key: str) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        raise FieldValidationError(key, RULE_TYPE, f"expected a map, got {_type_name(value)}")
    return value


def _absent_or_null(
    value: Any,
    *,
    key: str,
    required: bool,
    default: Any,
    allow_null: bool,
) -> tuple[bool, Any]:
    """Handle the absent/null cases shared by every validation.

    Returns (handled, result). When `handled` is False the caller validates
    `value` itself.
    """
    if value is MISSING:
        if required:
            raise FieldValidationError(key, RULE_REQUIRED, "is required")
        return True, default
    if value is None:
        if allow_null:
            return True, None
        raise FieldValidationError(key, RULE_NOT_NULL, "must not be null")
    return False, None


def _check_not_below(out: Any, *, key: str, floor_key: str | None, resolved: Mapping[str, Any]) -> None:
    if floor_key is None or out is None:
        return
    floor = resolved.get(floor_key)
    if floor is not None and floor > out:
        raise FieldValidationError(
            key,
            RULE_MIN_EXCEEDS_MAX,
            f"{floor_key} ({floor}) must not exceed {key} ({out})",
        )


def _check_bounds(
    out: float | int,
    *,
    key: str,
    greater_than: float | int | None,
    greater_than_or_equal: float | int | None,
    less_than: float | int | None,
) -> None:
    if greater_than is not None and not out > greater_than:
        raise FieldValidationError(key, RULE_RANGE, f"must be greater than {greater_than}, got {out}")
    if greater_than_or_equal is not None and not out >= greater_than_or_equal:
        raise FieldValidationError(
            key, RULE_RANGE, f"must be greater than or equal to {greater_than_or_equal}, got {out}"
        )
    if less_than is not None and not out < less_than:
        raise FieldValidationError(key, RULE_RANGE, f"must be less than {less_than}, got {out}")


# ----------------------------
# Scalar validations
# ----------------------------


@dataclass(frozen=True)
class StringValidation:
    required: bool = False
    default: str | None = None
    allow_null: bool = False
    allow_empty: bool = False
    alphanumeric_dash_underscore: bool = False
    pattern: str | None = None
    allowed_values: tuple[str, ...] | None = None

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> str | None:
        handled, out = _absent_or_null(
            value, key=key, required=self.required, default=self.default, allow_null=self.allow_null
        )
        if handled:
            return out

        s = coerce_str(value, key=key)
        if not s:
            if self.allow_empty:
                return s
            raise FieldValidationError(key, RULE_EMPTY, "must be a non-empty string")
        if self.alphanumeric_dash_underscore and not ALPHANUMERIC_DASH_UNDERSCORE.fullmatch(s):
            raise FieldValidationError(
                key,
                RULE_PATTERN,
                f"{s!r} may only contain letters, numbers, dashes and underscores",
            )
        if self.pattern is not None and not re.fullmatch(self.pattern, s):
            raise FieldValidationError(key, RULE_PATTERN, f"{s!r} does not match {self.pattern}")
        if self.allowed_values is not None and s not in self.allowed_values:
            raise FieldValidationError(
                key,
                RULE_ALLOWED_VALUES,
                f"{s!r} is not one of {list(self.allowed_values)}",
            )
        return s


@dataclass(frozen=True)
class BoolValidation:
    required: bool = False
    default: bool = False

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> bool:
        handled, out = _absent_or_null(
            value, key=key, required=self.required, default=self.default, allow_null=False
        )
        if handled:
            return out
        if not isinstance(value, bool):
            raise FieldValidationError(key, RULE_TYPE, f"expected a boolean, got {_type_name(value)}")
        return value


@dataclass(frozen=True)
class IntValidation:
    """Integer field; `allow_null=True` with no default gives pointer semantics.

    `not_below_key` names a sibling field (validated earlier) that must not be
    greater than this one, eg `max` declares `not_below_key="min"`.
    """

    bits: int = 64
    required: bool = False
    default: int | None = None
    allow_null: bool = False
    greater_than: int | None = None
    greater_than_or_equal: int | None = None
    less_than: int | None = None
    not_below_key: str | None = None

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> int | None:
        handled, out = _absent_or_null(
            value, key=key, required=self.required, default=self.default, allow_null=self.allow_null
        )
        if not handled:
            out = coerce_int(value, key=key, bits=self.bits)
            _check_bounds(
                out,
                key=key,
                greater_than=self.greater_than,
                greater_than_or_equal=self.greater_than_or_equal,
                less_than=self.less_than,
            )
        _check_not_below(out, key=key, floor_key=self.not_below_key, resolved=resolved)
        return out


@dataclass(frozen=True)
class FloatValidation:
    bits: int = 32
    required: bool = False
    default: float | None = None
    allow_null: bool = False
    greater_than: float | None = None
    greater_than_or_equal: float | None = None
    less_than: float | None = None
    not_below_key: str | None = None

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> float | None:
        handled, out = _absent_or_null(
            value, key=key, required=self.required, default=self.default, allow_null=self.allow_null
        )
        if not handled:
            out = coerce_float(value, key=key, bits=self.bits)
            _check_bounds(
                out,
                key=key,
                greater_than=self.greater_than,
                greater_than_or_equal=self.greater_than_or_equal,
                less_than=self.less_than,
            )
        _check_not_below(out, key=key, floor_key=self.not_below_key, resolved=resolved)
        return out


# ----------------------------
# List validations
# ----------------------------


@dataclass(frozen=True)
class _ListValidation:
    required: bool = False
    allow_null: bool = False

    def _element(self, value: Any, *, key: str) -> Any:  # pragma: no cover (abstract)
        raise NotImplementedError

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> tuple[Any, ...] | None:
        handled, out = _absent_or_null(value, key=key, required=self.required, default=None, allow_null=self.allow_null)
        if handled:
            return out
        items = _require_list(value, key=key)
        return tuple(self._element(v, key=f"{key}[{i}]") for i, v in enumerate(items))


@dataclass(frozen=True)
class IntListValidation(_ListValidation):
    bits: int = 64

    def _element(self, value: Any, *, key: str) -> int:
        if value is None:
            raise FieldValidationError(key, RULE_NOT_NULL, "must not be null")
        return coerce_int(value, key=key, bits=self.bits)


@dataclass(frozen=True)
class FloatListValidation(_ListValidation):
    bits: int = 32

    def _element(self, value: Any, *, key: str) -> float:
        if value is None:
            raise FieldValidationError(key, RULE_NOT_NULL, "must not be null")
        return coerce_float(value, key=key, bits=self.bits)


@dataclass(frozen=True)
class StringListValidation(_ListValidation):
    allow_empty_strings: bool = True

    def _element(self, value: Any, *, key: str) -> str:
        if value is None:
            raise FieldValidationError(key, RULE_NOT_NULL, "must not be null")
        s = coerce_str(value, key=key)
        if not s and not self.allow_empty_strings:
            raise FieldValidationError(key, RULE_EMPTY, "must be a non-empty string")
        return s


# ----------------------------
# Composite validations
# ----------------------------


@dataclass(frozen=True)
class FieldValidation:
    """One entry of an ordered field list: raw `key` -> constructor `attr`."""

    key: str
    attr: str
    validation: Any


def validate_fields(record: Mapping[Any, Any], fields: tuple[FieldValidation, ...]) -> dict[str, Any]:
    """Validate `record` against `fields` in declaration order.

    Unsupported keys are rejected before any field is validated. The first
    failing field aborts validation.

    Returns:
        dict mapping each field's `attr` to its coerced value.
    """
    supported = [f.key for f in fields]
    for k in record:
        if k not in supported:
            raise FieldValidationError(
                str(k), RULE_UNSUPPORTED_KEY, f"key is not supported (supported keys: {supported})"
            )

    resolved: dict[str, Any] = {}
    view = MappingProxyType(resolved)
    out: dict[str, Any] = {}
    for f in fields:
        value = f.validation.validate(record.get(f.key, MISSING), key=f.key, resolved=view)
        resolved[f.key] = value
        out[f.attr] = value
    return out


@dataclass(frozen=True)
class StructValidation:
    """Nested mapping validated by its own ordered field list.

    Absent or null yields `None` when `allow_null`; otherwise the nested fields
    are validated and passed as keyword arguments to `build`.
    """

    fields: tuple[FieldValidation, ...]
    build: Callable[..., Any]
    required: bool = False
    allow_null: bool = True

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> Any:
        handled, out = _absent_or_null(value, key=key, required=self.required, default=None, allow_null=self.allow_null)
        if handled:
            return out
        obj = _require_mapping(value, key=key)
        try:
            kwargs = validate_fields(obj, self.fields)
        except RawColumnError as e:
            e.with_key_prefix(key)
            raise
        return self.build(**kwargs)


_TAG_KEY = StringValidation(required=True, alphanumeric_dash_underscore=True)


@dataclass(frozen=True)
class TagsValidation:
    """Map of tag key -> scalar. Absent or null yields an empty mapping."""

    def validate(self, value: Any, *, key: str, resolved: Mapping[str, Any] = _EMPTY_MAPPING) -> Mapping[str, Any]:
        if value is MISSING or value is None:
            return _EMPTY_MAPPING
        obj = _require_mapping(value, key=key)
        out: dict[str, Any] = {}
        for k, v in obj.items():
            tag_key = _TAG_KEY.validate(k, key=f"{key}.{k}")
            if v is not None and not isinstance(v, (str, int, float, bool)):
                raise FieldValidationError(
                    f"{key}.{tag_key}", RULE_TYPE, f"tag values must be scalars, got {_type_name(v)}"
                )
            out[tag_key] = v
        return MappingProxyType(out)


__all__ = [
    "ALPHANUMERIC_DASH_UNDERSCORE",
    "BoolValidation",
    "FieldValidation",
    "FloatListValidation",
    "FloatValidation",
    "IntListValidation",
    "IntValidation",
    "MISSING",
    "StringListValidation",
    "StringValidation",
    "StructValidation",
    "TagsValidation",
    "coerce_float",
    "coerce_int",
    "coerce_str",
    "validate_fields",
]
