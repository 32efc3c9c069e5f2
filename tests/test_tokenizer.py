import pytest

from csvcodec.errors import MalformedInputError
from csvcodec.tokenizer import Delimiter, next_field, tokenize


def test_simple_rows_crlf():
    assert tokenize("a,b\r\nc,d") == [["a", "b"], ["c", "d"]]


def test_trailing_line_break_does_not_add_row():
    assert tokenize("a,b\r\n") == [["a", "b"]]


def test_empty_input_has_no_rows():
    assert tokenize("") == []


def test_trailing_comma_yields_null_field():
    assert tokenize("1,2,") == [["1", "2", None]]


def test_empty_fields_are_none():
    assert tokenize(",x,\r\n") == [[None, "x", None]]


def test_quoted_empty_is_none():
    assert tokenize('"",a') == [[None, "a"]]


def test_escaped_quotes_collapse():
    assert tokenize('"He said ""hi"""') == [['He said "hi"']]


def test_quoted_field_keeps_delimiters_and_line_breaks():
    text = '"a,b","line1\r\nline2",c'
    assert tokenize(text) == [["a,b", "line1\r\nline2", "c"]]


def test_configurable_line_break():
    assert tokenize("a,b\nc", line_break="\n") == [["a", "b"], ["c"]]
    # a lone LF is ordinary text under the default CRLF line-break
    assert tokenize("a\nb") == [["a\nb"]]


def test_blank_line_is_single_null_field():
    assert tokenize("a\r\n\r\nb") == [["a"], [None], ["b"]]


def test_start_offset():
    assert tokenize("skip|a,b", start=5) == [["a", "b"]]


def test_unterminated_quote_is_malformed():
    with pytest.raises(MalformedInputError) as exc:
        tokenize('"abc')
    assert "premature end of quoted field" in str(exc.value)
    assert exc.value.position == 0


def test_unterminated_after_escaped_quote_is_malformed():
    with pytest.raises(MalformedInputError):
        tokenize('x,"ab""')


def test_garbage_after_closing_quote_is_malformed():
    with pytest.raises(MalformedInputError) as exc:
        tokenize('"ab"c,d')
    assert exc.value.position == 4


def test_next_field_reports_delimiter_and_position():
    text = 'a,"b"\r\nc'
    assert next_field(text, 0) == ("a", Delimiter.FIELD, 2)
    assert next_field(text, 2) == ("b", Delimiter.ROW, 7)
    assert next_field(text, 7) == ("c", Delimiter.END, 8)


def test_empty_line_break_rejected():
    with pytest.raises(ValueError):
        tokenize("a", line_break="")
