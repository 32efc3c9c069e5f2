from __future__ import annotations

from typing import Any, Optional, Sequence


class CsvCodecError(ValueError):
    """Base class for every fatal render/parse failure."""


class MalformedInputError(CsvCodecError):
    """Raised when the source text cannot be tokenized (bad quoting)."""

    def __init__(self, *, position: int, reason: str) -> None:
        super().__init__(f"MalformedInput(position={position}): {reason}")
        self.position = position  # 0-based character offset in the source
        self.reason = reason


class ShapeViolationError(CsvCodecError):
    """Raised when a table row does not fit the table's shape or header."""

    def __init__(self, *, index: int, value: Any, reason: str) -> None:
        super().__init__(f"ShapeViolation(row={index}, value={value!r}): {reason}")
        self.index = index  # 0-based index into the table
        self.value = value
        self.reason = reason


class SchemaMismatchError(CsvCodecError):
    """Raised when a parsed row carries columns the target schema does not know."""

    def __init__(self, *, row: int, keys: Sequence[str], schema: str) -> None:
        super().__init__(
            f"SchemaMismatch(row={row}, schema={schema!r}): "
            f"unknown column(s) {', '.join(repr(k) for k in keys)}"
        )
        self.row = row  # 1-based line of the row in the source
        self.keys = list(keys)
        self.schema = schema


class UnsupportedValueError(CsvCodecError):
    """Raised when a value cannot be reduced to a CSV primitive."""

    def __init__(self, value: Any) -> None:
        type_name = type(value).__name__
        super().__init__(f"UnsupportedValue: cannot format value of type {type_name!r}: {value!r}")
        self.value = value
        self.type_name = type_name


class ConversionError(CsvCodecError):
    """Raised when a raw field cannot be coerced to its declared type."""

    def __init__(
        self,
        *,
        row: int,
        column: Optional[str],
        value: Optional[str],
        reason: str,
    ) -> None:
        super().__init__(
            f"ConversionError(row={row}, column={column!r}, value={value!r}): {reason}"
        )
        self.row = row
        self.column = column
        self.value = value
        self.reason = reason


__all__ = [
    "CsvCodecError",
    "MalformedInputError",
    "ShapeViolationError",
    "SchemaMismatchError",
    "UnsupportedValueError",
    "ConversionError",
]
