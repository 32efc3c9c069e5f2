from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import DEFAULT_LINE_BREAK, DELIMITER, QUOTE

Unification = Literal["error", "drop", "pad"]
LineBreakName = Literal["crlf", "lf", "cr"]
Primitive = Union[None, bool, int, float, str]


def _check_line_break(value: str) -> str:
    if not value:
        raise ValueError("line_break must not be empty")
    if DELIMITER in value or QUOTE in value:
        raise ValueError("line_break must not contain the delimiter or the quote character")
    return value


class RenderOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    line_break: str = Field(default=DEFAULT_LINE_BREAK)
    unification: Unification = "error"
    include_header: bool = True
    # value class -> function returning a primitive; merged over the defaults
    converters: Dict[Any, Callable[[Any], Any]] = Field(default_factory=dict)
    stringify_unknown: bool = False

    @field_validator("line_break")
    @classmethod
    def check_line_break(cls, value: str) -> str:
        return _check_line_break(value)


class ParseOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    row_schema: Optional[Any] = None
    include_header: bool = False
    line_break: str = Field(default=DEFAULT_LINE_BREAK)
    # declared type -> (str -> value); merged over the defaults
    converters: Dict[Any, Callable[[str], Any]] = Field(default_factory=dict)

    @field_validator("line_break")
    @classmethod
    def check_line_break(cls, value: str) -> str:
        return _check_line_break(value)


# ----------------------------
# HTTP service payloads
# ----------------------------

class RenderRequest(BaseModel):
    rows: List[Union[Dict[str, Primitive], List[Primitive], Primitive]] = Field(default_factory=list)
    # None falls back to the service defaults
    unification: Optional[Unification] = None
    include_header: bool = True
    line_break: Optional[LineBreakName] = None


class ParseResponse(BaseModel):
    rows: List[Union[Dict[str, Optional[str]], List[Optional[str]]]]
    count: int
    encoding: Optional[str] = Field(default=None, examples=["utf-8"])


class ErrorResponse(BaseModel):
    error: str
    detail: str


class HealthResponse(BaseModel):
    ok: bool = True
