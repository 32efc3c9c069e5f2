"""
CSV parsing.

Rows come out as:
- raw positional lists when neither a header row nor a schema names the columns;
- dicts of raw text when there is a header but no schema;
- schema records when a schema is given, with each field converted according to
  its declared type. Empty fields are left out so the schema default applies.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .converters import DEFAULT_PARSERS, converter_for, merge_registry
from .errors import ConversionError, SchemaMismatchError
from .models import ParseOptions
from .schema import RowSchema, as_row_schema
from .sources import read_source
from .tokenizer import RawRow, tokenize

logger = logging.getLogger(__name__)


def _header_names(row: RawRow) -> List[str]:
    return [name if name is not None else "" for name in row]


def _to_record(
    mapping: Mapping[str, Optional[str]],
    schema: RowSchema,
    converters: Mapping[str, Callable[[str], Any]],
    line: int,
) -> Any:
    unknown = [key for key in mapping if key not in converters]
    if unknown:
        raise SchemaMismatchError(row=line, keys=unknown, schema=schema.name)

    values: Dict[str, Any] = {}
    for column, raw in mapping.items():
        if raw is None:
            continue
        try:
            values[column] = converters[column](raw)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ConversionError(row=line, column=column, value=raw, reason=str(e)) from e

    try:
        return schema.build(values)
    except (ValueError, TypeError) as e:
        raise ConversionError(
            row=line, column=None, value=None,
            reason=f"Cannot build {schema.name}: {e}",
        ) from e


def parse_rows(
    raw_rows: Sequence[RawRow],
    *,
    schema: Optional[RowSchema] = None,
    include_header: bool = False,
    converters: Optional[Mapping[Any, Callable[[str], Any]]] = None,
) -> List[Any]:
    """Turn tokenized rows into records (see module docstring)."""
    first_line = 1
    if include_header:
        if not raw_rows:
            return []
        header = _header_names(raw_rows[0])
        data = raw_rows[1:]
        first_line = 2
    elif schema is not None:
        header = schema.names
        data = raw_rows
    else:
        return [list(row) for row in raw_rows]

    if schema is None:
        return [dict(zip(header, row)) for row in data]

    registry = merge_registry(DEFAULT_PARSERS, converters)
    by_column = {p.name: converter_for(p.declared_type, registry) for p in schema.visible_properties()}

    return [
        _to_record(dict(zip(header, row)), schema, by_column, first_line + offset)
        for offset, row in enumerate(data)
    ]


def parse(source: Any, options: Optional[ParseOptions] = None, **overrides: Any) -> List[Any]:
    """
    Parse CSV `source` (text, bytes, or a readable resource).

    `options` may be given as a ParseOptions, as keyword overrides, or both
    (keywords win). Raises MalformedInputError, SchemaMismatchError or
    ConversionError.
    """
    opts = _resolve_options(options, overrides)
    text = read_source(source)
    schema = as_row_schema(opts.row_schema) if opts.row_schema is not None else None

    raw_rows = tokenize(text, opts.line_break)
    records = parse_rows(
        raw_rows,
        schema=schema,
        include_header=opts.include_header,
        converters=opts.converters,
    )
    logger.debug(
        "parsed %d record(s) (schema=%s, header=%s)",
        len(records), schema.name if schema else None, opts.include_header,
    )
    return records


def _resolve_options(options: Optional[ParseOptions], overrides: Mapping[str, Any]) -> ParseOptions:
    if options is None:
        return ParseOptions(**overrides)
    if not overrides:
        return options
    return ParseOptions(**{**dict(options), **overrides})


__all__ = ["parse", "parse_rows"]
