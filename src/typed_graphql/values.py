"""Literal input values (the small AST used for arguments and defaults)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class NullValue:
    """The null literal."""

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return None

    def render(self) -> str:
        return "null"


@dataclass(frozen=True)
class IntValue:
    value: int

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return self.value

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue:
    value: float

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return self.value

    def render(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class StringValue:
    value: str

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return self.value

    def render(self) -> str:
        # JSON string escaping is a subset of GraphQL's
        return json.dumps(self.value, ensure_ascii=False)


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return self.value

    def render(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class EnumValue:
    """A bare enum name, e.g. ``ASC``. Evaluates to the name string."""

    name: str

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return self.name

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class Variable:
    """A ``$name`` reference, looked up in the request's variables."""

    name: str

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        if not variables:
            return None
        return variables.get(self.name)

    def render(self) -> str:
        return f"${self.name}"


@dataclass(frozen=True)
class ListValue:
    items: tuple[Value, ...] = ()

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return [item.to_python(variables) for item in self.items]

    def render(self) -> str:
        return "[" + ", ".join(item.render() for item in self.items) + "]"


@dataclass(frozen=True)
class ObjectValue:
    """An input object literal. Field order is preserved."""

    fields: tuple[tuple[str, Value], ...] = field(default_factory=tuple)

    def to_python(self, variables: Mapping[str, Any] | None = None) -> Any:
        return {name: value.to_python(variables) for name, value in self.fields}

    def render(self) -> str:
        return "{" + ", ".join(f"{name}: {value.render()}" for name, value in self.fields) + "}"


Value = Union[
    NullValue,
    IntValue,
    FloatValue,
    StringValue,
    BooleanValue,
    EnumValue,
    Variable,
    ListValue,
    ObjectValue,
]


def literal(value: Any) -> Value:
    """Build a literal AST from a plain Python value.

    Values that already are literal nodes are returned unchanged, so
    declarations may mix both forms.
    """
    if isinstance(
        value,
        (NullValue, IntValue, FloatValue, StringValue, BooleanValue, EnumValue, Variable, ListValue, ObjectValue),
    ):
        return value
    if value is None:
        return NullValue()
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return BooleanValue(value)
    if isinstance(value, int):
        return IntValue(value)
    if isinstance(value, float):
        return FloatValue(value)
    if isinstance(value, str):
        return StringValue(value)
    if isinstance(value, Enum):
        return EnumValue(value.name)
    if isinstance(value, (list, tuple)):
        return ListValue(tuple(literal(item) for item in value))
    if isinstance(value, Mapping):
        return ObjectValue(tuple((str(k), literal(v)) for k, v in value.items()))
    raise TypeError(f"Cannot express {type(value).__name__} as a GraphQL literal")
