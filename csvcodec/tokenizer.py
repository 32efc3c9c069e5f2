"""
Raw-field scanner.

Splits CSV text into rows of optional raw strings. Quoted fields have their
doubled quotes collapsed; empty fields (quoted or not) become None.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Tuple

from .errors import MalformedInputError
from .rules import DEFAULT_LINE_BREAK, DELIMITER, ESCAPED_QUOTE, QUOTE

logger = logging.getLogger(__name__)

RawField = Optional[str]
RawRow = List[RawField]


class Delimiter(enum.Enum):
    FIELD = "field"  # comma: the row continues
    ROW = "row"      # line-break: the row is complete
    END = "end"      # end of input


@dataclass
class _ScanState:
    position: int
    fields: RawRow = field(default_factory=list)
    rows: List[RawRow] = field(default_factory=list)

    def flush(self) -> None:
        self.rows.append(self.fields)
        self.fields = []


@lru_cache(maxsize=8)
def _stop_pattern(line_break: str) -> "re.Pattern[str]":
    return re.compile(re.escape(DELIMITER) + "|" + re.escape(line_break))


def _quoted_extent(text: str, position: int) -> int:
    """Return the index of the quote closing the field opened at `position`."""
    i = position + 1
    while True:
        j = text.find(QUOTE, i)
        if j == -1:
            raise MalformedInputError(position=position, reason="premature end of quoted field")
        if text.startswith(ESCAPED_QUOTE, j):
            i = j + len(ESCAPED_QUOTE)
            continue
        return j


def next_field(text: str, position: int, line_break: str = DEFAULT_LINE_BREAK) -> Tuple[RawField, Delimiter, int]:
    """
    Scan one field starting at `position`.

    Returns (value, delimiter that ended it, position after the delimiter).
    """
    end = len(text)

    if text.startswith(QUOTE, position):
        close = _quoted_extent(text, position)
        value = text[position + 1:close].replace(ESCAPED_QUOTE, QUOTE)
        after = close + 1
    else:
        stop = _stop_pattern(line_break).search(text, position)
        after = stop.start() if stop is not None else end
        value = text[position:after]

    if after >= end:
        return (value or None), Delimiter.END, end
    if text.startswith(DELIMITER, after):
        return (value or None), Delimiter.FIELD, after + len(DELIMITER)
    if text.startswith(line_break, after):
        return (value or None), Delimiter.ROW, after + len(line_break)

    raise MalformedInputError(
        position=after,
        reason=f"unexpected character {text[after]!r} after closing quote",
    )


def tokenize(text: str, line_break: str = DEFAULT_LINE_BREAK, start: int = 0) -> List[RawRow]:
    """Tokenize the whole of `text` (from `start`) into raw rows."""
    if not line_break:
        raise ValueError("line_break must be a non-empty string")

    state = _ScanState(position=start)
    end = len(text)

    while state.position < end:
        value, delimiter, state.position = next_field(text, state.position, line_break)
        state.fields.append(value)

        if delimiter is Delimiter.FIELD:
            # a comma as the last character still promises one more (empty) field
            if state.position >= end:
                state.fields.append(None)
                state.flush()
        else:
            state.flush()

    logger.debug("tokenized %d row(s) from %d character(s)", len(state.rows), end - start)
    return state.rows


__all__ = ["Delimiter", "RawField", "RawRow", "next_field", "tokenize"]
