"""Concrete object types that can back an interface."""

from __future__ import annotations

import dataclasses
import inspect
from typing import Any, ClassVar

from typed_graphql.context import Context, Field, do_resolve, resolve_output
from typed_graphql.errors import FieldNotFound, GraphQLError, UnrecognizedInlineFragment
from typed_graphql.types import FieldDescriptor, ObjectTypeDescriptor, TypeRegistry, type_ref
from typed_graphql.values import literal


class ObjectType:
    """Base class for application objects exposed through GraphQL.

    The GraphQL name is ``__typename__`` when set on the class itself,
    otherwise the class name. ``__fields__`` maps field names to their
    output types; when it is non-empty, only those fields can be queried.
    Field values come from attributes, properties or (sync or async) methods
    of the same name; query arguments are passed as keyword arguments.

    Example:
        class User(ObjectType):
            __fields__ = {"id": non_null("ID"), "name": "String"}

            def __init__(self, id, name):
                self.id = id
                self.name = name
    """

    __typename__: ClassVar[str | None] = None
    __fields__: ClassVar[dict[str, Any]] = {}

    @classmethod
    def type_name(cls) -> str:
        return cls.__dict__.get("__typename__") or cls.__name__

    @classmethod
    def create_type_info(cls, registry: TypeRegistry) -> str:
        """Register this type's descriptor and return its name."""
        return registry.create_type(cls, cls._build_type)

    @classmethod
    def _description(cls) -> str | None:
        doc = cls.__dict__.get("__doc__")
        if not doc:
            return None
        # @dataclass fills a missing docstring with the constructor signature
        if dataclasses.is_dataclass(cls) and doc.startswith(cls.__name__ + "("):
            return None
        return inspect.cleandoc(doc)

    @classmethod
    def _build_type(cls, registry: TypeRegistry) -> ObjectTypeDescriptor:
        return ObjectTypeDescriptor(
            name=cls.type_name(),
            description=cls._description(),
            fields=[
                FieldDescriptor(name=name, type_ref=type_ref(ref).create_type_info(registry))
                for name, ref in cls.__fields__.items()
            ],
        )

    def runtime_type_name(self) -> str:
        return type(self).type_name()

    async def resolve_field(self, ctx: Context, field: Field) -> Any:
        """Resolve one field of this object."""
        if field.name.startswith("_") or (self.__fields__ and field.name not in self.__fields__):
            raise FieldNotFound(field.name, self.type_name(), field.position)
        try:
            attr = getattr(self, field.name)
        except AttributeError:
            raise FieldNotFound(field.name, self.type_name(), field.position) from None

        if callable(attr):
            kwargs = {name: literal(value).to_python(ctx.variables) for name, value in field.arguments.items()}
            value = attr(**kwargs)
            if inspect.isawaitable(value):
                value = await value
        else:
            value = attr

        try:
            return await resolve_output(value, ctx.with_field(field))
        except GraphQLError as e:
            raise e.with_position(field.position)

    async def resolve_inline_fragment(self, name: str, ctx: Context, result: dict[str, Any]) -> None:
        """Resolve ``... on name`` when this object is (or implements) ``name``.

        A fragment on another registered type contributes nothing.
        """
        if ctx.registry.is_possible_type(name, self.type_name()):
            await do_resolve(ctx, self, result)
            return
        if ctx.registry.is_defined(name):
            return
        raise UnrecognizedInlineFragment(self.type_name(), name)
