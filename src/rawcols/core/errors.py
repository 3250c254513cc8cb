"""Error taxonomy for raw column validation.

Every failure is an ordinary, expected outcome and derives from
`RawColumnError` (a `ValueError`). Messages are stable and suitable for test
assertions:

    raw_columns[<index>] (<column>).<key>: <detail>

Validation is first-failure: the first violation found is raised and no
partial collection is returned.
"""

from __future__ import annotations

from typing import Any

# Rule identifiers carried on every error.
RULE_REQUIRED = "required"
RULE_NOT_NULL = "not_null"
RULE_TYPE = "type"
RULE_EMPTY = "empty"
RULE_PATTERN = "pattern"
RULE_ALLOWED_VALUES = "allowed_values"
RULE_RANGE = "range"
RULE_MIN_EXCEEDS_MAX = "min_exceeds_max"
RULE_UNSUPPORTED_KEY = "unsupported_key"
RULE_MISSING_TYPE = "missing_type"
RULE_UNKNOWN_TYPE = "unknown_type"
RULE_DUPLICATE_NAME = "duplicate_name"
RULE_DOCUMENT = "document"


class RawColumnError(ValueError):
    """Base class for raw column validation failures.

    Attributes:
        key: field key that failed (may be nested, eg `compute.executors`)
        rule: rule identifier (see the RULE_* constants)
        detail: human readable description of the violation
        index: position of the offending record in the document, if known
        column: name of the offending column, if known
    """

    def __init__(
        self,
        detail: str,
        *,
        key: str | None = None,
        rule: str,
        index: int | None = None,
        column: str | None = None,
    ) -> None:
        self.detail = detail
        self.key = key
        self.rule = rule
        self.index = index
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        where = "raw_columns"
        if self.index is not None:
            where += f"[{self.index}]"
        if self.column is not None:
            where += f" ({self.column})"
        if self.key:
            where += f".{self.key}"
        return f"{where}: {self.detail}"

    def with_context(self, *, index: int | None = None, column: str | None = None) -> "RawColumnError":
        """Attach record identity (keeps values already set) and return self."""
        if self.index is None:
            self.index = index
        if self.column is None:
            self.column = column
        self.args = (self._format(),)
        return self

    def with_key_prefix(self, prefix: str) -> "RawColumnError":
        """Nest the failing key under `prefix` (used by struct sub-validators)."""
        self.key = f"{prefix}.{self.key}" if self.key else prefix
        self.args = (self._format(),)
        return self

    def __str__(self) -> str:
        return self._format()


class DiscriminatorError(RawColumnError):
    """The `type` tag is missing or names no known variant."""


class FieldValidationError(RawColumnError):
    """A single field failed its constraint."""

    def __init__(self, key: str, rule: str, detail: str, **context: Any) -> None:
        super().__init__(detail, key=key, rule=rule, **context)


class DuplicateNameError(RawColumnError):
    """Two declarations in one collection share a name."""

    def __init__(self, name: str, resource_type: Any, **context: Any) -> None:
        self.name = name
        self.resource_type = resource_type
        display = getattr(resource_type, "display_name", str(resource_type))
        super().__init__(
            f"{display} name {name!r} is defined more than once",
            key="name",
            rule=RULE_DUPLICATE_NAME,
            column=name,
            **context,
        )


class DocumentError(RawColumnError):
    """The document could not be read or decoded into raw records."""

    def __init__(self, detail: str, *, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{path}: {detail}" if path else detail, rule=RULE_DOCUMENT)

    def _format(self) -> str:
        return self.detail


__all__ = [
    "DiscriminatorError",
    "DocumentError",
    "DuplicateNameError",
    "FieldValidationError",
    "RawColumnError",
    "RULE_ALLOWED_VALUES",
    "RULE_DOCUMENT",
    "RULE_DUPLICATE_NAME",
    "RULE_EMPTY",
    "RULE_MIN_EXCEEDS_MAX",
    "RULE_MISSING_TYPE",
    "RULE_NOT_NULL",
    "RULE_PATTERN",
    "RULE_RANGE",
    "RULE_REQUIRED",
    "RULE_TYPE",
    "RULE_UNKNOWN_TYPE",
    "RULE_UNSUPPORTED_KEY",
]
