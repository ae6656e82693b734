"""Field requests, the resolution context and the output-value protocol."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Union

from typed_graphql.errors import ArgumentBindingError, GraphQLError, Position, QueryError
from typed_graphql.types import (
    INT_MAX,
    INT_MIN,
    Fallible,
    ListType,
    NamedType,
    NonNullType,
    TypeRef,
    TypeRegistry,
)
from typed_graphql.values import Value, Variable, literal

logger = logging.getLogger(__name__)

TYPENAME_FIELD = "__typename"


# ---- Requests ----


@dataclass
class Field:
    """A single field selection, as produced by the query parser."""

    name: str
    arguments: dict[str, Value] = field(default_factory=dict)
    selection_set: SelectionSet | None = None
    position: Position | None = None
    alias: str | None = None

    @property
    def response_key(self) -> str:
        return self.alias or self.name


@dataclass
class InlineFragment:
    """``... on Type { ... }``. A missing type condition always applies."""

    type_condition: str | None
    selection_set: SelectionSet
    position: Position | None = None


Selection = Union[Field, InlineFragment]


@dataclass
class SelectionSet:
    items: list[Selection] = field(default_factory=list)

    def __iter__(self) -> Iterator[Selection]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def selection(*items: Selection) -> SelectionSet:
    """Shorthand for building a selection set."""
    return SelectionSet(list(items))


# ---- Context ----


class Context:
    """State shared by one resolution: registry, variables, collected errors.

    Child contexts created by ``with_field`` and ``with_selection_set`` share
    the registry, the variables and the error list with their parent.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        selection_set: SelectionSet | None = None,
        variables: Mapping[str, Any] | None = None,
        field: Field | None = None,
        errors: list[GraphQLError] | None = None,
    ) -> None:
        self.registry = registry
        self.selection_set = selection_set
        self.variables: Mapping[str, Any] = variables or {}
        self.field = field
        self.errors: list[GraphQLError] = errors if errors is not None else []

    def _derive(self, selection_set: SelectionSet | None, field: Field | None) -> Context:
        return Context(
            self.registry,
            selection_set=selection_set,
            variables=self.variables,
            field=field,
            errors=self.errors,
        )

    def with_field(self, field: Field) -> Context:
        """Context for binding ``field``'s arguments and resolving its value."""
        return self._derive(field.selection_set, field)

    def with_selection_set(self, selection_set: SelectionSet | None) -> Context:
        return self._derive(selection_set, self.field)

    def param_value(
        self,
        name: str,
        arg_type: TypeRef,
        default: Value | None = None,
    ) -> Any:
        """Bind an argument of the current field to a Python value.

        The supplied literal wins; otherwise the ``default`` literal is used, otherwise
        null. A variable the request does not define counts as not supplied.
        The result is coerced against ``arg_type``.

        Raises:
            ArgumentBindingError: If the value is missing or has the wrong shape.
        """
        position = self.field.position if self.field is not None else None
        supplied = self.field.arguments.get(name) if self.field is not None else None
        if isinstance(supplied, Variable) and supplied.name not in self.variables:
            supplied = None
        if supplied is not None:
            raw = literal(supplied).to_python(self.variables)
        elif default is not None:
            raw = default.to_python(self.variables)
        else:
            raw = None

        try:
            return coerce_input(arg_type, raw)
        except ValueError as e:
            raise ArgumentBindingError(name, str(e), position) from e


# ---- Argument coercion ----


def coerce_input(arg_type: TypeRef, value: Any) -> Any:
    """Coerce a Python value to the shape of an input type.

    Raises:
        ValueError: If the value cannot represent the type.
    """
    if isinstance(arg_type, Fallible):
        return coerce_input(arg_type.of_type, value)
    if isinstance(arg_type, NonNullType):
        if value is None:
            raise ValueError(f"expected a non-null value of type {arg_type}")
        return coerce_input(arg_type.of_type, value)
    if value is None:
        return None
    if isinstance(arg_type, ListType):
        if isinstance(value, (list, tuple)):
            return [coerce_input(arg_type.of_type, item) for item in value]
        # A single value is accepted where a list is expected
        return [coerce_input(arg_type.of_type, value)]
    return _coerce_scalar(arg_type, value)


def _coerce_scalar(arg_type: NamedType, value: Any) -> Any:
    name = arg_type.name
    if name == "Int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Int cannot represent {value!r}")
        if not INT_MIN <= value <= INT_MAX:
            raise ValueError(f"Int cannot represent non 32-bit signed integer {value!r}")
        return value
    if name == "Float":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Float cannot represent {value!r}")
        return float(value)
    if name == "String":
        if not isinstance(value, str):
            raise ValueError(f"String cannot represent {value!r}")
        return value
    if name == "Boolean":
        if not isinstance(value, bool):
            raise ValueError(f"Boolean cannot represent {value!r}")
        return value
    if name == "ID":
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError(f"ID cannot represent {value!r}")
        return str(value)
    # Enums, input objects and custom scalars are passed through
    return value


# ---- Output values ----


async def resolve_output(value: Any, ctx: Context) -> Any:
    """Serialize a resolved value against the context's selection set."""
    if value is None:
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.name
    if hasattr(value, "resolve_field"):
        if ctx.selection_set is None:
            type_name = runtime_type_name(value)
            raise QueryError(f'Field of type "{type_name}" must have a selection of subfields.')
        result: dict[str, Any] = {}
        await do_resolve(ctx, value, result)
        return result
    if isinstance(value, (list, tuple)):
        return [await resolve_output(item, ctx) for item in value]
    raise GraphQLError(f"Cannot serialize value of type {type(value).__name__}")


def runtime_type_name(obj: Any) -> str:
    """The concrete GraphQL type name of a resolved object."""
    getter = getattr(obj, "runtime_type_name", None)
    if getter is not None:
        return getter()
    return type(obj).type_name()


async def do_resolve(ctx: Context, obj: Any, result: dict[str, Any]) -> None:
    """Resolve ``ctx.selection_set`` against ``obj`` into ``result``.

    Errors of one field or fragment are recorded in ``ctx.errors`` and leave
    the field null; sibling selections still resolve.
    """
    if ctx.selection_set is None:
        return
    for item in ctx.selection_set:
        if isinstance(item, Field):
            if item.name == TYPENAME_FIELD:
                result[item.response_key] = runtime_type_name(obj)
                continue
            try:
                result[item.response_key] = await obj.resolve_field(ctx, item)
            except GraphQLError as e:
                logger.debug("Field %s failed: %s", item.name, e)
                ctx.errors.append(e.with_position(item.position))
                result[item.response_key] = None
        else:
            child = ctx.with_selection_set(item.selection_set)
            try:
                if item.type_condition is None:
                    await do_resolve(child, obj, result)
                else:
                    await obj.resolve_inline_fragment(item.type_condition, child, result)
            except GraphQLError as e:
                ctx.errors.append(e.with_position(item.position))
