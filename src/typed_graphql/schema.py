"""Schema class tying interfaces, object types and the registry together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from typed_graphql.context import Context, SelectionSet, resolve_output
from typed_graphql.errors import GraphQLError, InterfaceDefinitionError
from typed_graphql.parsing import InterfaceParser
from typed_graphql.types import InterfaceTypeDescriptor, ObjectTypeDescriptor, TypeDescriptor, TypeRegistry

logger = logging.getLogger(__name__)


@dataclass
class Response:
    """Result of resolving a selection set: data plus any field errors."""

    data: Any
    errors: list[GraphQLError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"data": self.data}
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        return result


class Schema:
    """A built registry of interfaces and object types, ready to serve."""

    def __init__(self, registry: TypeRegistry) -> None:
        """Initialize a schema.

        Args:
            registry: Type registry with every type already registered.
        """
        self.registry = registry

    @classmethod
    def build(cls, *types: Any, registry: TypeRegistry | None = None) -> Schema:
        """Register the given interfaces and object types and validate the result.

        Args:
            types: Interface classes and object types to register.
            registry: Registry to populate; a new one by default.

        Returns:
            A new Schema instance.

        Raises:
            InterfaceDefinitionError: If a type is malformed or a referenced
                type name was never registered.
        """
        registry = registry if registry is not None else TypeRegistry()
        for t in types:
            t.create_type_info(registry)

        missing = registry.missing_types()
        if missing:
            raise InterfaceDefinitionError(f"Unknown types referenced: {missing}")
        logger.debug("Built schema with %d types", len(registry.list_types()))
        return cls(registry)

    @classmethod
    def parse(cls, definitions: str, types: Mapping[str, Any] | Iterable[Any]) -> Schema:
        """Parse interface declarations and build a schema from them.

        Args:
            definitions: Interface declarations.
            types: Concrete object types the declarations refer to.

        Returns:
            A new Schema instance.
        """
        types = dict(types) if isinstance(types, Mapping) else list(types)
        interfaces = InterfaceParser().compile(definitions, types)
        concrete = types.values() if isinstance(types, dict) else types
        return cls.build(*concrete, *interfaces)

    def get_type(self, name: str) -> TypeDescriptor:
        """Get a type descriptor by name.

        Raises:
            KeyError: If the type is not found.
        """
        return self.registry.get_or_raise(name)

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return self.registry.list_types()

    def possible_types(self, interface_name: str) -> list[str]:
        """Concrete types allowed for an interface, in declaration order."""
        descriptor = self.get_type(interface_name)
        if not isinstance(descriptor, InterfaceTypeDescriptor):
            raise TypeError(f"Type '{interface_name}' is not an interface")
        return list(descriptor.possible_types)

    def to_sdl(self) -> str:
        """Render every interface and object type as GraphQL SDL."""
        blocks = [
            td.to_sdl()
            for td in (self.registry.get(name) for name in self.list_types())
            if isinstance(td, (InterfaceTypeDescriptor, ObjectTypeDescriptor))
        ]
        return "\n\n".join(blocks)

    async def resolve(
        self,
        value: Any,
        selection_set: SelectionSet,
        variables: Mapping[str, Any] | None = None,
    ) -> Response:
        """Resolve a selection set against a root value.

        Errors of individual fields are collected in the response; the
        remaining fields still resolve.
        """
        ctx = Context(self.registry, selection_set=selection_set, variables=variables)
        try:
            data = await resolve_output(value, ctx)
        except GraphQLError as e:
            ctx.errors.append(e)
            data = None
        return Response(data=data, errors=ctx.errors)
