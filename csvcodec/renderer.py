"""
CSV rendering.

A table is a sequence of rows. A row is a Mapping (named), a list/tuple
(positional), or, when the whole table is flat, a single scalar. The header is
worked out once from the named rows according to the unification policy:

- "error": keys of the first row; every named row must have exactly those keys.
- "drop":  keys of the first row; extra keys are ignored, missing ones render empty.
- "pad":   union of keys across all named rows, in first-seen order.

Positional rows carry no names and are written field by field.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .converters import DEFAULT_FORMATTERS, find_formatter, merge_registry
from .errors import ShapeViolationError, UnsupportedValueError
from .models import RenderOptions
from .rules import DEFAULT_LINE_BREAK, DELIMITER, ESCAPED_QUOTE, QUOTE

logger = logging.getLogger(__name__)


# ----------------------------
# Value formatting
# ----------------------------

def quote_text(text: str, line_break: str = DEFAULT_LINE_BREAK) -> str:
    if (
        DELIMITER in text
        or QUOTE in text
        or line_break in text
        or "\r" in text
        or "\n" in text
    ):
        return QUOTE + text.replace(QUOTE, ESCAPED_QUOTE) + QUOTE
    return text


def format_value(
    value: Any,
    line_break: str = DEFAULT_LINE_BREAK,
    converters: Optional[Mapping[type, Callable[[Any], Any]]] = None,
    stringify_unknown: bool = False,
) -> str:
    """Format one value as a CSV field; `converters` defaults to the built-in render converters."""
    registry = DEFAULT_FORMATTERS if converters is None else converters
    if value is not None and registry:
        fn = find_formatter(value, registry)
        if fn is not None:
            value = fn(value)

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return quote_text(value, line_break)
    if stringify_unknown:
        return quote_text(str(value), line_break)
    raise UnsupportedValueError(value)


# ----------------------------
# Shape + header
# ----------------------------

def _is_structured(row: Any) -> bool:
    return isinstance(row, (Mapping, list, tuple))


def check_shape(table: Sequence[Any]) -> bool:
    """Return True for a structured table, False for a flat table of scalars."""
    if not table:
        return True
    structured = _is_structured(table[0])
    for index, row in enumerate(table):
        if _is_structured(row) != structured:
            expected = "a structured row (mapping or list)" if structured else "a scalar"
            raise ShapeViolationError(index=index, value=row, reason=f"expected {expected}")
    return structured


def _row_keys(row: Any) -> List[Any]:
    return list(row.keys()) if isinstance(row, Mapping) else []


def resolve_header(table: Sequence[Any], unification: str) -> List[Any]:
    if not table:
        return []

    if unification == "pad":
        seen: Dict[Any, None] = {}
        for row in table:
            for key in _row_keys(row):
                seen.setdefault(key, None)
        return list(seen)

    header = _row_keys(table[0])
    if unification == "error":
        expected = set(header)
        for index, row in enumerate(table):
            if isinstance(row, Mapping) and set(row.keys()) != expected:
                missing = sorted(map(str, expected - set(row.keys())))
                extra = sorted(map(str, set(row.keys()) - expected))
                raise ShapeViolationError(
                    index=index,
                    value=row,
                    reason=f"keys do not match header (missing={missing}, extra={extra})",
                )
    return header


# ----------------------------
# Rendering
# ----------------------------

def _row_values(row: Any, header: Sequence[Any], structured: bool) -> Iterable[Any]:
    if not structured:
        return (row,)
    if isinstance(row, Mapping):
        return (row.get(column) for column in header)
    return row


def render(table: Sequence[Any], options: Optional[RenderOptions] = None, **overrides: Any) -> str:
    """
    Render `table` as CSV text.

    `options` may be given as a RenderOptions, as keyword overrides, or both
    (keywords win). Raises ShapeViolationError or UnsupportedValueError.
    """
    opts = _resolve_options(options, overrides)
    table = list(table)

    structured = check_shape(table)
    header = resolve_header(table, opts.unification) if structured else []
    converters = merge_registry(DEFAULT_FORMATTERS, opts.converters)

    def fmt(value: Any) -> str:
        return format_value(value, opts.line_break, converters, opts.stringify_unknown)

    lines: List[str] = []
    if opts.include_header and header:
        lines.append(DELIMITER.join(fmt(column) for column in header))
    for row in table:
        lines.append(DELIMITER.join(fmt(v) for v in _row_values(row, header, structured)))

    logger.debug(
        "rendered %d row(s), header=%r, unification=%s",
        len(table), header, opts.unification,
    )
    return opts.line_break.join(lines)


def _resolve_options(options: Optional[RenderOptions], overrides: Mapping[str, Any]) -> RenderOptions:
    if options is None:
        return RenderOptions(**overrides)
    if not overrides:
        return options
    return RenderOptions(**{**dict(options), **overrides})


__all__ = ["render", "format_value", "quote_text", "resolve_header", "check_shape"]
