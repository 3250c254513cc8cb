"""Static registry of raw column variants.

Maps each discriminator string to the variant class and its ordered field
list. The tables below are plain data so they can be reviewed and tested
independently of any document decoder. They are built once at import time
and never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from rawcols.core.fields import (
    BoolValidation,
    FieldValidation,
    FloatListValidation,
    FloatValidation,
    IntListValidation,
    IntValidation,
    StringListValidation,
    StringValidation,
    StructValidation,
    TagsValidation,
)
from rawcols.core.model import (
    COLUMN_TYPES,
    FLOAT_COLUMN,
    INT_COLUMN,
    STRING_COLUMN,
    FloatColumn,
    IntColumn,
    RawColumn,
    SparkCompute,
    StringColumn,
)


@dataclass(frozen=True)
class VariantType:
    cls: type[RawColumn]
    fields: tuple[FieldValidation, ...]

    def keys(self) -> list[str]:
        return [f.key for f in self.fields]


@dataclass(frozen=True)
class InterfaceStructValidation:
    """Discriminated-union description: `type_key` selects one of `variants`."""

    type_key: str
    variants: Mapping[str, VariantType]

    def lookup(self, type_str: str) -> VariantType | None:
        # exact, case-sensitive
        return self.variants.get(type_str)

    def type_names(self) -> list[str]:
        return list(self.variants.keys())


# ----------------------------
# Shared field validations
# ----------------------------

# Kubernetes-style quantity, eg "500Mi", "2G", "1.5Gi".
_MEMORY_QUANTITY = r"[0-9]+(\.[0-9]+)?(Ki|Mi|Gi|Ti|K|M|G|T)?"

SPARK_COMPUTE_FIELDS: tuple[FieldValidation, ...] = (
    FieldValidation("executors", "executors", IntValidation(bits=32, default=1, greater_than=0)),
    FieldValidation("driver_cores", "driver_cores", IntValidation(bits=32, default=1, greater_than=0)),
    FieldValidation("driver_mem", "driver_mem", StringValidation(default="500Mi", pattern=_MEMORY_QUANTITY)),
    FieldValidation("executor_cores", "executor_cores", IntValidation(bits=32, default=1, greater_than=0)),
    FieldValidation("executor_mem", "executor_mem", StringValidation(default="500Mi", pattern=_MEMORY_QUANTITY)),
    FieldValidation(
        "mem_overhead_factor",
        "mem_overhead_factor",
        FloatValidation(allow_null=True, greater_than_or_equal=0, less_than=1),
    ),
)

NAME_FIELD = FieldValidation("name", "name", StringValidation(required=True, alphanumeric_dash_underscore=True))
REQUIRED_FIELD = FieldValidation("required", "required", BoolValidation(default=False))
COMPUTE_FIELD = FieldValidation("compute", "compute", StructValidation(SPARK_COMPUTE_FIELDS, build=SparkCompute))
TAGS_FIELD = FieldValidation("tags", "tags", TagsValidation())
TYPE_FIELD = FieldValidation("type", "type", StringValidation(required=True, allowed_values=COLUMN_TYPES))


INT_COLUMN_FIELDS: tuple[FieldValidation, ...] = (
    NAME_FIELD,
    REQUIRED_FIELD,
    FieldValidation("min", "min", IntValidation(bits=64, allow_null=True)),
    FieldValidation("max", "max", IntValidation(bits=64, allow_null=True, not_below_key="min")),
    FieldValidation("values", "values", IntListValidation(bits=64, allow_null=True)),
    COMPUTE_FIELD,
    TAGS_FIELD,
    TYPE_FIELD,
)

FLOAT_COLUMN_FIELDS: tuple[FieldValidation, ...] = (
    NAME_FIELD,
    REQUIRED_FIELD,
    FieldValidation("min", "min", FloatValidation(bits=32, allow_null=True)),
    FieldValidation("max", "max", FloatValidation(bits=32, allow_null=True, not_below_key="min")),
    FieldValidation("values", "values", FloatListValidation(bits=32, allow_null=True)),
    COMPUTE_FIELD,
    TAGS_FIELD,
    TYPE_FIELD,
)

STRING_COLUMN_FIELDS: tuple[FieldValidation, ...] = (
    NAME_FIELD,
    REQUIRED_FIELD,
    FieldValidation("values", "values", StringListValidation(allow_null=True)),
    COMPUTE_FIELD,
    TAGS_FIELD,
    TYPE_FIELD,
)


RAW_COLUMN_VALIDATION = InterfaceStructValidation(
    type_key="type",
    variants=MappingProxyType(
        {
            STRING_COLUMN: VariantType(cls=StringColumn, fields=STRING_COLUMN_FIELDS),
            INT_COLUMN: VariantType(cls=IntColumn, fields=INT_COLUMN_FIELDS),
            FLOAT_COLUMN: VariantType(cls=FloatColumn, fields=FLOAT_COLUMN_FIELDS),
        }
    ),
)


__all__ = [
    "FLOAT_COLUMN_FIELDS",
    "INT_COLUMN_FIELDS",
    "InterfaceStructValidation",
    "RAW_COLUMN_VALIDATION",
    "SPARK_COMPUTE_FIELDS",
    "STRING_COLUMN_FIELDS",
    "VariantType",
]
