"""
csvcodec — RFC 4180 CSV rendering and schema-directed parsing.

- render(table, ...) -> CSV text from rows of mappings, lists, or scalars
- parse(source, ...) -> dicts, raw lists, or schema records
"""

from .errors import (
    ConversionError,
    CsvCodecError,
    MalformedInputError,
    SchemaMismatchError,
    ShapeViolationError,
    UnsupportedValueError,
)
from .models import ParseOptions, RenderOptions
from .parser import parse
from .renderer import format_value, render
from .schema import Property, RowSchema, as_row_schema
from .tokenizer import tokenize

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "render",
    "parse",
    "tokenize",
    "format_value",
    "RenderOptions",
    "ParseOptions",
    "Property",
    "RowSchema",
    "as_row_schema",
    "CsvCodecError",
    "MalformedInputError",
    "ShapeViolationError",
    "SchemaMismatchError",
    "UnsupportedValueError",
    "ConversionError",
]
