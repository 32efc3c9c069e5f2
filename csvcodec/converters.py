"""
Type converters for both directions.

Parse side: a declared type resolves to a `str -> value` function. Aliases
resolve to their referent, unions try each member in declaration order and take
the first one with a registered converter. That union rule is a heuristic: it
does not check the raw value against the member type.

Render side: per-class functions that reduce arbitrary values to one of the
CSV primitives (None, int, float, str, bool).
"""

from __future__ import annotations

import enum
import types
import typing
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from uuid import UUID

Parser = Callable[[str], Any]

BOOL_TRUE: Tuple[str, ...] = ("true", "t", "yes", "y", "1")
BOOL_FALSE: Tuple[str, ...] = ("false", "f", "no", "n", "0")

_UNION_ORIGINS = (typing.Union, types.UnionType)


class TypeKind(enum.Enum):
    CONCRETE = "concrete"
    ALIAS = "alias"
    UNION = "union"


def parse_bool(raw: str) -> bool:
    s = raw.strip().lower()
    if s in BOOL_TRUE:
        return True
    if s in BOOL_FALSE:
        return False
    raise ValueError(f"Invalid bool literal: {raw!r}")


def _identity(raw: str) -> str:
    return raw


DEFAULT_PARSERS: Dict[Any, Parser] = {
    int: int,
    float: float,
    bool: parse_bool,
    Decimal: Decimal,
    datetime: datetime.fromisoformat,
    date: date.fromisoformat,
}


def _enum_value(value: enum.Enum) -> Any:
    return value.value


DEFAULT_FORMATTERS: Dict[type, Callable[[Any], Any]] = {
    datetime: lambda v: v.isoformat(),
    date: lambda v: v.isoformat(),
    time: lambda v: v.isoformat(),
    Decimal: str,
    UUID: str,
    enum.Enum: _enum_value,
}


def classify(tp: Any) -> Tuple[TypeKind, Any]:
    """Tag a type descriptor as concrete, alias (with referent) or union (with members)."""
    origin = typing.get_origin(tp)
    if origin is typing.Annotated:
        return TypeKind.ALIAS, typing.get_args(tp)[0]
    if origin in _UNION_ORIGINS:
        return TypeKind.UNION, typing.get_args(tp)
    # typing.NewType
    if callable(tp) and hasattr(tp, "__supertype__"):
        return TypeKind.ALIAS, tp.__supertype__
    # PEP 695 `type X = ...`
    if type(tp).__name__ == "TypeAliasType" and hasattr(tp, "__value__"):
        return TypeKind.ALIAS, tp.__value__
    return TypeKind.CONCRETE, tp


def resolve_converter(tp: Any, registry: Mapping[Any, Parser]) -> Optional[Parser]:
    """Find the registered converter for `tp`, or None if there is none."""
    kind, target = classify(tp)
    if kind is TypeKind.ALIAS:
        return resolve_converter(target, registry)
    if kind is TypeKind.UNION:
        for member in target:
            found = resolve_converter(member, registry)
            if found is not None:
                return found
        return None
    try:
        return registry.get(target)
    except TypeError:
        # unhashable descriptors (e.g. some Literal args) have no converter
        return None


def converter_for(tp: Any, registry: Optional[Mapping[Any, Parser]] = None) -> Parser:
    """Converter for `tp`; text passes through unchanged when none is registered."""
    found = resolve_converter(tp, DEFAULT_PARSERS if registry is None else registry)
    return found if found is not None else _identity


def merge_registry(defaults: Mapping[Any, Any], overrides: Optional[Mapping[Any, Any]]) -> Dict[Any, Any]:
    merged = dict(defaults)
    if overrides:
        merged.update(overrides)
    return merged


def find_formatter(value: Any, registry: Mapping[type, Callable[[Any], Any]]) -> Optional[Callable[[Any], Any]]:
    """Most specific render converter for `value`, walking its class MRO."""
    is_bool = isinstance(value, bool)
    for klass in type(value).__mro__:
        # booleans are not numbers here
        if is_bool and klass is int:
            continue
        fn = registry.get(klass)
        if fn is not None:
            return fn
    return None


__all__ = [
    "TypeKind",
    "Parser",
    "DEFAULT_PARSERS",
    "DEFAULT_FORMATTERS",
    "classify",
    "resolve_converter",
    "converter_for",
    "merge_registry",
    "find_formatter",
    "parse_bool",
]
