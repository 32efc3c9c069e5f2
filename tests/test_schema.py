from dataclasses import dataclass, field
from typing import Optional

import pytest
from pydantic import BaseModel, Field

from csvcodec.schema import Property, RowSchema, as_row_schema


class Base(BaseModel):
    id: int
    secret: str = Field(default="", exclude=True)


class Person(Base):
    name: str
    age: Optional[int] = None


@dataclass
class Point:
    x: float
    y: float
    label: str = field(default="", metadata={"hidden": True})


@dataclass
class Point3(Point):
    z: float = 0.0


def test_pydantic_walks_base_first():
    schema = as_row_schema(Person)
    assert [s.name for s in schema.lineage()] == ["Base", "Person"]
    assert schema.names == ["id", "name", "age"]
    assert [p.name for p in schema.all_properties()] == ["id", "secret", "name", "age"]


def test_pydantic_exclude_is_hidden():
    schema = as_row_schema(Person)
    hidden = [p.name for p in schema.all_properties() if p.hidden]
    assert hidden == ["secret"]


def test_pydantic_build_uses_model():
    record = as_row_schema(Person).build({"id": 1, "name": "Ann"})
    assert isinstance(record, Person)
    assert record.age is None


def test_dataclass_schema():
    schema = as_row_schema(Point3)
    assert schema.base is not None and schema.base.name == "Point"
    assert schema.names == ["x", "y", "z"]
    assert schema.build({"x": 1.0, "y": 2.0}) == Point3(x=1.0, y=2.0)


def test_explicit_schema_redeclaration_keeps_position():
    base = RowSchema(name="base", properties=(Property("a", int), Property("b")))
    child = RowSchema(name="child", properties=(Property("a", float), Property("c")), base=base)
    props = child.all_properties()
    assert [p.name for p in props] == ["a", "b", "c"]
    assert props[0].declared_type is float
    assert child.build({"a": 1.0}) == {"a": 1.0}


def test_unsupported_schema_object():
    with pytest.raises(TypeError):
        as_row_schema(dict)


class Measure(BaseModel):
    value: int
    unit: str = "m"


class PreciseMeasure(Measure):
    value: float


@dataclass
class Count:
    n: int


@dataclass
class Fraction(Count):
    n: float = 0.0


class Stamped(BaseModel):
    stamp: str = ""


class Tagged(BaseModel):
    tag: str = ""


class Event(Tagged, Stamped):
    name: str


class Labeled(BaseModel):
    user_id: int = Field(alias="User ID")


def test_pydantic_redeclared_field_takes_new_type():
    props = as_row_schema(PreciseMeasure).all_properties()
    assert [p.name for p in props] == ["value", "unit"]
    assert props[0].declared_type is float


def test_dataclass_redeclared_field_takes_new_type():
    props = as_row_schema(Fraction).all_properties()
    assert [p.name for p in props] == ["n"]
    assert props[0].declared_type is float


def test_pydantic_multiple_bases_follow_model_field_order():
    schema = as_row_schema(Event)
    assert [s.name for s in schema.lineage()] == ["Stamped", "Tagged", "Event"]
    assert schema.names == list(Event.model_fields) == ["stamp", "tag", "name"]


def test_pydantic_alias_names_the_column():
    schema = as_row_schema(Labeled)
    assert schema.names == ["User ID"]
    assert schema.build({"User ID": 3}) == Labeled(**{"User ID": 3})
