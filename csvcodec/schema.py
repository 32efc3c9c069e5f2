"""
Row schema descriptors.

A RowSchema names its own properties and optionally a base schema; property
lookup walks the bases least-derived first. Hidden properties are never
populated from CSV columns.

pydantic models (hidden = `Field(exclude=True)`) and dataclasses
(hidden = `field(metadata={"hidden": True})`) convert via `as_row_schema`.
"""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel


@dataclass(frozen=True)
class Property:
    name: str
    declared_type: Any = str
    hidden: bool = False


@dataclass(frozen=True)
class RowSchema:
    name: str
    properties: Tuple[Property, ...] = ()
    base: Optional["RowSchema"] = None
    factory: Optional[Callable[..., Any]] = None

    def lineage(self) -> List["RowSchema"]:
        chain: List[RowSchema] = []
        node: Optional[RowSchema] = self
        while node is not None:
            chain.append(node)
            node = node.base
        chain.reverse()
        return chain

    def all_properties(self) -> List[Property]:
        """Every property, inherited ones first; a redeclaration keeps its slot but takes the new type."""
        out: Dict[str, Property] = {}
        for schema in self.lineage():
            for prop in schema.properties:
                out[prop.name] = prop
        return list(out.values())

    def visible_properties(self) -> List[Property]:
        return [p for p in self.all_properties() if not p.hidden]

    @property
    def names(self) -> List[str]:
        return [p.name for p in self.visible_properties()]

    def build(self, values: Dict[str, Any]) -> Any:
        if self.factory is None:
            return dict(values)
        return self.factory(**values)


def _lineage_classes(cls: type, member: Callable[[type], bool]) -> List[type]:
    """Classes of `cls`'s MRO accepted by `member`, least-derived first."""
    return [klass for klass in reversed(cls.__mro__) if member(klass)]


def _chain(
    classes: List[type],
    own_properties: Callable[[type, Dict[str, Any]], Tuple[Property, ...]],
) -> RowSchema:
    # `seen` maps field name -> declared type over the classes walked so far
    seen: Dict[str, Any] = {}
    node: Optional[RowSchema] = None
    for klass in classes:
        node = RowSchema(
            name=klass.__name__,
            properties=own_properties(klass, seen),
            base=node,
            factory=klass,
        )
    assert node is not None
    return node


def _is_model(klass: type) -> bool:
    return isinstance(klass, type) and issubclass(klass, BaseModel) and klass is not BaseModel


def _column_name(name: str, info: Any) -> str:
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _model_properties(model: type, seen: Dict[str, Any]) -> Tuple[Property, ...]:
    props = []
    for name, info in model.model_fields.items():
        if name in seen and seen[name] == info.annotation:
            continue
        seen[name] = info.annotation
        props.append(
            Property(name=_column_name(name, info), declared_type=info.annotation, hidden=bool(info.exclude))
        )
    return tuple(props)


def from_pydantic(model: type) -> RowSchema:
    """Columns are named by each field's alias when it has one."""
    return _chain(_lineage_classes(model, _is_model), _model_properties)


def _dataclass_properties(cls: type, seen: Dict[str, Any]) -> Tuple[Property, ...]:
    hints = typing.get_type_hints(cls)
    props = []
    for f in dataclasses.fields(cls):
        declared = hints.get(f.name, f.type)
        if f.name in seen and seen[f.name] == declared:
            continue
        seen[f.name] = declared
        props.append(
            Property(
                name=f.name,
                declared_type=declared,
                hidden=bool(f.metadata.get("hidden", False)) or not f.init,
            )
        )
    return tuple(props)


def from_dataclass(cls: type) -> RowSchema:
    return _chain(_lineage_classes(cls, dataclasses.is_dataclass), _dataclass_properties)


def as_row_schema(obj: Any) -> RowSchema:
    """Coerce a RowSchema, pydantic model class, or dataclass type into a RowSchema."""
    if isinstance(obj, RowSchema):
        return obj
    if isinstance(obj, type) and issubclass(obj, BaseModel):
        return from_pydantic(obj)
    if isinstance(obj, type) and dataclasses.is_dataclass(obj):
        return from_dataclass(obj)
    raise TypeError(f"Unsupported row schema: {obj!r}")


__all__ = ["Property", "RowSchema", "as_row_schema", "from_pydantic", "from_dataclass"]
