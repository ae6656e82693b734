"""Typed GraphQL - closed-world GraphQL interfaces with typed dispatch."""

from typed_graphql.context import Context, Field, InlineFragment, SelectionSet, selection
from typed_graphql.errors import (
    ArgumentBindingError,
    FieldNotFound,
    FieldResolutionError,
    GraphQLError,
    InterfaceDefinitionError,
    Position,
    QueryError,
    UnrecognizedInlineFragment,
)
from typed_graphql.interface import (
    ArgSpec,
    FieldSpec,
    Interface,
    InterfaceSpec,
    VariantSpec,
    define_interface,
)
from typed_graphql.objects import ObjectType
from typed_graphql.parsing import InterfaceParser
from typed_graphql.schema import Response, Schema
from typed_graphql.types import (
    FieldDescriptor,
    InputValueDescriptor,
    InterfaceTypeDescriptor,
    ObjectTypeDescriptor,
    TypeRegistry,
    fallible,
    list_of,
    non_null,
)

__all__ = [
    # Main API
    "Schema",
    "Response",
    "Interface",
    "ObjectType",
    "InterfaceParser",
    "define_interface",
    # Declarations
    "InterfaceSpec",
    "FieldSpec",
    "ArgSpec",
    "VariantSpec",
    "non_null",
    "list_of",
    "fallible",
    # Requests
    "Context",
    "Field",
    "InlineFragment",
    "SelectionSet",
    "selection",
    "Position",
    # Registry
    "TypeRegistry",
    "InterfaceTypeDescriptor",
    "ObjectTypeDescriptor",
    "FieldDescriptor",
    "InputValueDescriptor",
    # Errors
    "GraphQLError",
    "QueryError",
    "FieldNotFound",
    "UnrecognizedInlineFragment",
    "ArgumentBindingError",
    "FieldResolutionError",
    "InterfaceDefinitionError",
]

__version__ = "0.1.0"
