import typing
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, NewType, Optional, Union

import pytest

from csvcodec.converters import (
    DEFAULT_PARSERS,
    TypeKind,
    classify,
    converter_for,
    parse_bool,
    resolve_converter,
)

UserId = NewType("UserId", int)


def test_classify_kinds():
    assert classify(int) == (TypeKind.CONCRETE, int)
    assert classify(UserId) == (TypeKind.ALIAS, int)
    assert classify(Annotated[float, "meters"]) == (TypeKind.ALIAS, float)
    kind, members = classify(Optional[int])
    assert kind is TypeKind.UNION
    assert int in members


def test_concrete_converters():
    assert converter_for(int)("42") == 42
    assert converter_for(float)("1.5") == 1.5
    assert converter_for(Decimal)("1.10") == Decimal("1.10")
    assert converter_for(date)("2024-02-29") == date(2024, 2, 29)
    assert converter_for(datetime)("2021-05-01T12:30:00") == datetime(2021, 5, 1, 12, 30)


def test_unregistered_type_is_identity():
    assert converter_for(str)("x") == "x"
    assert converter_for(list)("[1]") == "[1]"
    assert resolve_converter(str, DEFAULT_PARSERS) is None


def test_alias_resolves_to_referent():
    assert converter_for(UserId)("7") == 7


def test_nested_alias_and_annotated():
    Meters = NewType("Meters", float)
    assert converter_for(Annotated[Meters, "unit"])("2.5") == 2.5


def test_union_takes_first_member_with_converter():
    # str has no converter, so int wins even though str is listed first
    conv = converter_for(Union[str, int])
    assert conv("5") == 5
    with pytest.raises(ValueError):
        conv("abc")


def test_union_declaration_order():
    assert converter_for(Union[float, int])("3") == 3.0
    assert isinstance(converter_for(Union[float, int])("3"), float)


def test_pep604_union_and_optional():
    assert converter_for(int | None)("9") == 9
    assert converter_for(Optional[bool])("yes") is True


def test_union_without_converters_is_identity():
    assert converter_for(Union[str, bytes])("raw") == "raw"


def test_custom_registry():
    conv = converter_for(int, {int: lambda s: int(s, 16)})
    assert conv("ff") == 255


def test_literal_is_identity():
    assert converter_for(typing.Literal["a", "b"])("a") == "a"


def test_bool_literals():
    assert [parse_bool(s) for s in ["true", "FALSE", "T", "f", "Yes", "no", "1", "0"]] == [
        True, False, True, False, True, False, True, False,
    ]
    with pytest.raises(ValueError) as exc:
        parse_bool("maybe")
    assert "Invalid bool literal" in str(exc.value)
