"""
Fixed codec rules.

The field delimiter and quote character are not configurable; only the
line-break is.
"""

DELIMITER = ","
QUOTE = '"'
ESCAPED_QUOTE = QUOTE * 2

DEFAULT_LINE_BREAK = "\r\n"  # RFC 4180
LINE_BREAKS = {
    "crlf": "\r\n",
    "lf": "\n",
    "cr": "\r",
}

SOURCE_ENCODING = "utf-8"
