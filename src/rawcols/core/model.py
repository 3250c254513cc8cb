"""Typed raw column declarations.

Every concrete variant is a frozen dataclass deriving from `RawColumn`, which
is the only surface downstream code may depend on:

- `name`           column name (immutable)
- `type`           discriminator string (also `discriminator`)
- `compute`        `SparkCompute | None`
- `resource_type`  constant `ResourceType.RAW_COLUMN`

Variants are normally built by `rawcols.core.dispatch`, which validates the
raw record first. Direct construction is supported for tests and callers that
already hold clean values; lists are frozen to tuples and tags to a read-only
mapping.

This module must not import the registry/dispatch/io/cli layers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Sequence

from rawcols.core.errors import (
    RULE_ALLOWED_VALUES,
    RULE_RANGE,
    RULE_REQUIRED,
    RULE_TYPE,
    FieldValidationError,
)
from rawcols.core.fields import coerce_float, coerce_int, coerce_str


class ResourceType(str, Enum):
    """Place of a declaration in the resource taxonomy."""

    RAW_COLUMN = "raw_column"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")

    def __str__(self) -> str:
        return self.value


STRING_COLUMN = "STRING_COLUMN"
INT_COLUMN = "INT_COLUMN"
FLOAT_COLUMN = "FLOAT_COLUMN"

# Closed enumeration of discriminator values.
COLUMN_TYPES: tuple[str, ...] = (STRING_COLUMN, INT_COLUMN, FLOAT_COLUMN)


@dataclass(frozen=True)
class SparkCompute:
    """Compute resources requested for producing a column (opaque to validation)."""

    executors: int = 1
    driver_cores: int = 1
    driver_mem: str = "500Mi"
    executor_cores: int = 1
    executor_mem: str = "500Mi"
    mem_overhead_factor: float | None = None


def _freeze_tags(tags: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if isinstance(tags, MappingProxyType):
        return tags
    return MappingProxyType(dict(tags or {}))


def _freeze_values(values: Sequence[Any] | None) -> tuple[Any, ...] | None:
    return None if values is None else tuple(values)


class RawColumn(ABC):
    """Capability interface shared by every raw column variant."""

    COLUMN_TYPE: ClassVar[str]
    RESOURCE_TYPE: ClassVar[ResourceType] = ResourceType.RAW_COLUMN

    name: str
    type: str
    required: bool
    values: tuple[Any, ...] | None
    compute: SparkCompute | None
    tags: Mapping[str, Any]

    def _freeze(self) -> None:
        if self.type != self.COLUMN_TYPE:
            raise FieldValidationError(
                "type",
                RULE_TYPE,
                f"{type(self).__name__} requires type {self.COLUMN_TYPE!r}, got {self.type!r}",
                column=self.name,
            )
        object.__setattr__(self, "values", _freeze_values(self.values))
        object.__setattr__(self, "tags", _freeze_tags(self.tags))

    def _field_hash(self) -> int:
        # tags is a read-only mapping; hash its items so equal columns hash equal.
        return hash(
            tuple(
                frozenset(v.items()) if isinstance(v, Mapping) else v
                for v in (getattr(self, f.name) for f in fields(self))
            )
        )

    @property
    def discriminator(self) -> str:
        return self.type

    @property
    def resource_type(self) -> ResourceType:
        return self.RESOURCE_TYPE

    def is_raw(self) -> bool:
        return True

    def user_config(self) -> "RawColumn":
        return self

    @abstractmethod
    def _coerce_value(self, value: Any) -> Any:
        """Type-check a single data value for this variant."""

    def _check_bounds(self, value: Any) -> None:
        return None

    def check_value(self, value: Any) -> Any:
        """Check one data value against this declaration.

        Null is accepted only for non-required columns. A `values` set of
        `None` is unrestricted; an empty `values` set rejects everything.

        Returns:
            the coerced value (or None)
        """
        if value is None:
            if self.required:
                raise FieldValidationError("value", RULE_REQUIRED, "value is required", column=self.name)
            return None
        out = self._coerce_value(value)
        self._check_bounds(out)
        if self.values is not None and out not in self.values:
            raise FieldValidationError(
                "value",
                RULE_ALLOWED_VALUES,
                f"{out!r} is not one of the allowed values {list(self.values)}",
                column=self.name,
            )
        return out

    def summary(self) -> dict[str, Any]:
        """Plain-dict view of the declaration (see `rawcols.core.tables`)."""
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "min": None,
            "max": None,
            "values": None if self.values is None else list(self.values),
            "has_compute": self.compute is not None,
            "tags": dict(self.tags),
        }


class _BoundedColumn(RawColumn):
    min: Any
    max: Any

    def _check_bounds(self, value: Any) -> None:
        if self.min is not None and value < self.min:
            raise FieldValidationError(
                "value", RULE_RANGE, f"{value} is less than min ({self.min})", column=self.name
            )
        if self.max is not None and value > self.max:
            raise FieldValidationError(
                "value", RULE_RANGE, f"{value} is greater than max ({self.max})", column=self.name
            )

    def summary(self) -> dict[str, Any]:
        out = super().summary()
        out["min"] = self.min
        out["max"] = self.max
        return out


@dataclass(frozen=True)
class IntColumn(_BoundedColumn):
    COLUMN_TYPE: ClassVar[str] = INT_COLUMN

    name: str
    type: str = INT_COLUMN
    required: bool = False
    min: int | None = None
    max: int | None = None
    values: tuple[int, ...] | None = None
    compute: SparkCompute | None = None
    tags: Mapping[str, Any] = field(default_factory=dict)

    __hash__ = RawColumn._field_hash

    def __post_init__(self) -> None:
        self._freeze()

    def _coerce_value(self, value: Any) -> int:
        return coerce_int(value, key="value", bits=64)


@dataclass(frozen=True)
class FloatColumn(_BoundedColumn):
    COLUMN_TYPE: ClassVar[str] = FLOAT_COLUMN

    name: str
    type: str = FLOAT_COLUMN
    required: bool = False
    min: float | None = None
    max: float | None = None
    values: tuple[float, ...] | None = None
    compute: SparkCompute | None = None
    tags: Mapping[str, Any] = field(default_factory=dict)

    __hash__ = RawColumn._field_hash

    def __post_init__(self) -> None:
        self._freeze()

    def _coerce_value(self, value: Any) -> float:
        return coerce_float(value, key="value", bits=32)


@dataclass(frozen=True)
class StringColumn(RawColumn):
    COLUMN_TYPE: ClassVar[str] = STRING_COLUMN

    name: str
    type: str = STRING_COLUMN
    required: bool = False
    values: tuple[str, ...] | None = None
    compute: SparkCompute | None = None
    tags: Mapping[str, Any] = field(default_factory=dict)

    __hash__ = RawColumn._field_hash

    def __post_init__(self) -> None:
        self._freeze()

    def _coerce_value(self, value: Any) -> str:
        return coerce_str(value, key="value")


class RawColumns(Sequence[RawColumn]):
    """Ordered, immutable collection of raw column declarations.

    Construction does not check collection invariants; call `validate()` (or
    build via `rawcols.core.validate.validate_raw_columns`).
    """

    __slots__ = ("_columns",)

    def __init__(self, columns: Sequence[RawColumn] = ()) -> None:
        self._columns: tuple[RawColumn, ...] = tuple(columns)

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return RawColumns(self._columns[index])
        return self._columns[index]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[RawColumn]:
        return iter(self._columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawColumns):
            return NotImplemented
        return self._columns == other._columns

    def __repr__(self) -> str:
        return f"RawColumns({list(self._columns)!r})"

    def names(self) -> list[str]:
        return [c.name for c in self._columns]

    def get(self, name: str) -> RawColumn | None:
        for c in self._columns:
            if c.name == name:
                return c
        return None

    def validate(self) -> None:
        """Check collection-wide invariants (unique names)."""
        from rawcols.core.validate import validate_raw_column_names

        validate_raw_column_names(self._columns)


__all__ = [
    "COLUMN_TYPES",
    "FLOAT_COLUMN",
    "INT_COLUMN",
    "STRING_COLUMN",
    "FloatColumn",
    "IntColumn",
    "RawColumn",
    "RawColumns",
    "ResourceType",
    "SparkCompute",
    "StringColumn",
]
