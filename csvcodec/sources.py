"""
Parse-source handling.

A source is text, raw bytes, or anything with a `.read()` returning either.
Bytes are decoded with the best guess from charset-normalizer.
"""

from __future__ import annotations

import codecs
import logging
from typing import Any, Tuple

from charset_normalizer import from_bytes

from .rules import SOURCE_ENCODING

logger = logging.getLogger(__name__)


def decode_bytes(raw: bytes) -> Tuple[str, str]:
    """
    Decode `raw` to text, returning (text, encoding used).

    Rules:
    - A UTF-8 BOM forces utf-8-sig so the BOM does not leak into the first header cell.
    - Otherwise use charset-normalizer's best guess, or utf-8 when it has none.
    - If that decode fails, retry utf-8, then decode with replacement characters.
    """
    if raw.startswith(codecs.BOM_UTF8):
        return raw.decode("utf-8-sig"), "utf-8-sig"

    match = from_bytes(raw).best()
    encoding = match.encoding if match is not None else SOURCE_ENCODING

    try:
        return raw.decode(encoding), encoding
    except (UnicodeDecodeError, LookupError):
        logger.debug("decode with detected encoding %r failed, retrying %s", encoding, SOURCE_ENCODING)

    try:
        return raw.decode(SOURCE_ENCODING), SOURCE_ENCODING
    except UnicodeDecodeError:
        logger.warning("source is not valid %s; undecodable bytes replaced", SOURCE_ENCODING)
        return raw.decode(SOURCE_ENCODING, errors="replace"), SOURCE_ENCODING


def read_source(source: Any) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        text, encoding = decode_bytes(bytes(source))
        logger.debug("decoded %d byte(s) as %s", len(source), encoding)
        return text
    read = getattr(source, "read", None)
    if callable(read):
        content = read()
        if isinstance(content, (str, bytes, bytearray)):
            return read_source(content)
        raise TypeError(f"Source .read() returned {type(content).__name__}, expected str or bytes")
    raise TypeError(f"Unsupported CSV source: {type(source).__name__}")


__all__ = ["decode_bytes", "read_source"]
