"""Type references, schema descriptors and the type registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from typed_graphql.values import StringValue

logger = logging.getLogger(__name__)


# Built-in scalar names, pre-registered in every registry
BUILTIN_SCALARS: dict[str, str] = {
    "Int": "Signed 32-bit integer.",
    "Float": "Signed double-precision floating-point value.",
    "String": "UTF-8 character sequence.",
    "Boolean": "true or false.",
    "ID": "Unique identifier, serialized as a string.",
}

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


# ---- Type references ----


@dataclass(frozen=True)
class NamedType:
    """Reference to a named type.

    ``of`` is either a type name registered in the registry (scalars) or a
    class exposing ``type_name()`` and ``create_type_info(registry)``.
    """

    of: Any

    @property
    def name(self) -> str:
        if isinstance(self.of, str):
            return self.of
        return self.of.type_name()

    @property
    def allows_absence(self) -> bool:
        return True

    def unwrap(self) -> TypeRef:
        return self

    def named_type(self) -> NamedType:
        return self

    def create_type_info(self, registry: TypeRegistry) -> str:
        """Return the type reference string, registering the named type if needed."""
        if isinstance(self.of, str):
            registry.require(self.of)
            return self.of
        return self.of.create_type_info(registry)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListType:
    """``[T]``"""

    of_type: TypeRef

    @property
    def allows_absence(self) -> bool:
        return True

    def unwrap(self) -> TypeRef:
        return self

    def named_type(self) -> NamedType:
        return self.of_type.named_type()

    def create_type_info(self, registry: TypeRegistry) -> str:
        return f"[{self.of_type.create_type_info(registry)}]"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


@dataclass(frozen=True)
class NonNullType:
    """``T!``"""

    of_type: TypeRef

    @property
    def allows_absence(self) -> bool:
        return False

    def unwrap(self) -> TypeRef:
        return self

    def named_type(self) -> NamedType:
        return self.of_type.named_type()

    def create_type_info(self, registry: TypeRegistry) -> str:
        return f"{self.of_type.create_type_info(registry)}!"

    def __str__(self) -> str:
        return f"{self.of_type}!"


@dataclass(frozen=True)
class Fallible:
    """A return type whose resolver may fail.

    The wrapper only affects error handling in the dispatcher; the schema
    sees the wrapped type.
    """

    of_type: TypeRef

    @property
    def allows_absence(self) -> bool:
        return self.of_type.allows_absence

    def unwrap(self) -> TypeRef:
        return self.of_type.unwrap()

    def named_type(self) -> NamedType:
        return self.of_type.named_type()

    def create_type_info(self, registry: TypeRegistry) -> str:
        return self.of_type.create_type_info(registry)

    def __str__(self) -> str:
        return str(self.of_type)


TypeRef = Union[NamedType, ListType, NonNullType, Fallible]


def type_ref(value: Any) -> TypeRef:
    """Coerce a type name, a class or an existing reference into a TypeRef."""
    if isinstance(value, (NamedType, ListType, NonNullType, Fallible)):
        return value
    return NamedType(value)


def non_null(value: Any) -> NonNullType:
    return NonNullType(type_ref(value))


def list_of(value: Any) -> ListType:
    return ListType(type_ref(value))


def fallible(value: Any) -> Fallible:
    return Fallible(type_ref(value))


def is_fallible(ref: TypeRef) -> bool:
    return isinstance(ref, Fallible)


# ---- Schema descriptors ----


@dataclass
class InputValueDescriptor:
    """An argument as seen by introspection."""

    name: str
    type_ref: str
    description: str | None = None
    default_value: str | None = None  # canonical literal string

    def to_sdl(self) -> str:
        text = f"{self.name}: {self.type_ref}"
        if self.default_value is not None:
            text += f" = {self.default_value}"
        if self.description:
            text = f"{_sdl_description(self.description, inline=True)} {text}"
        return text


@dataclass
class FieldDescriptor:
    """An output field as seen by introspection."""

    name: str
    type_ref: str
    description: str | None = None
    args: list[InputValueDescriptor] = field(default_factory=list)
    deprecation: str | None = None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation is not None

    def get_arg(self, name: str) -> InputValueDescriptor | None:
        for arg in self.args:
            if arg.name == name:
                return arg
        return None


@dataclass
class TypeDescriptor:
    """Base class for all registered type descriptors."""

    name: str
    description: str | None = None

    @property
    def kind(self) -> str:
        raise NotImplementedError

    @property
    def is_abstract(self) -> bool:
        return False


@dataclass
class ScalarTypeDescriptor(TypeDescriptor):
    @property
    def kind(self) -> str:
        return "SCALAR"


@dataclass
class ObjectTypeDescriptor(TypeDescriptor):
    """Descriptor contributed by a concrete object type."""

    fields: list[FieldDescriptor] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "OBJECT"

    def get_field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_sdl(self) -> str:
        header = f"type {self.name}"
        if self.interfaces:
            header += " implements " + " & ".join(self.interfaces)
        return render_type_block(header, self.description, self.fields)


@dataclass
class InterfaceTypeDescriptor(TypeDescriptor):
    """Descriptor of an interface: its field contract and possible types."""

    fields: list[FieldDescriptor] = field(default_factory=list)
    possible_types: list[str] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "INTERFACE"

    @property
    def is_abstract(self) -> bool:
        return True

    def get_field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_sdl(self) -> str:
        return render_type_block(f"interface {self.name}", self.description, self.fields)


def _sdl_description(text: str, inline: bool = False, indent: str = "") -> str:
    if inline or "\n" not in text:
        return indent + _quote(text)
    lines = [indent + '"""'] + [indent + line for line in text.splitlines()] + [indent + '"""']
    return "\n".join(lines)


def _quote(text: str) -> str:
    return StringValue(text).render()


def render_type_block(header: str, description: str | None, fields: list[FieldDescriptor]) -> str:
    lines: list[str] = []
    if description:
        lines.append(_sdl_description(description))
    if not fields:
        lines.append(header)
        return "\n".join(lines)
    lines.append(header + " {")
    for f in fields:
        if f.description:
            lines.append(_sdl_description(f.description, indent="  "))
        text = f"  {f.name}"
        if f.args:
            text += "(" + ", ".join(arg.to_sdl() for arg in f.args) + ")"
        text += f": {f.type_ref}"
        if f.deprecation is not None:
            text += f" @deprecated(reason: {_quote(f.deprecation)})"
        lines.append(text)
    lines.append("}")
    return "\n".join(lines)


# ---- Registry ----


class TypeRegistry:
    """Registry of all type descriptors known to a schema.

    Also records which interfaces each concrete type implements. Entries are
    written while the schema is built and only read afterwards.
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self._owners: dict[str, Any] = {}
        self._implements: dict[str, set[str]] = {}
        self._required: set[str] = set()
        self._register_scalars()

    def _register_scalars(self) -> None:
        """Register the built-in scalar types."""
        for name, description in BUILTIN_SCALARS.items():
            self._types[name] = ScalarTypeDescriptor(name=name, description=description)
            self._owners[name] = None

    def register(self, type_def: TypeDescriptor) -> None:
        """Register a descriptor that has no owning class (e.g. a custom scalar)."""
        if type_def.name in self._owners:
            raise ValueError(f"Type '{type_def.name}' is already defined")
        self._owners[type_def.name] = None
        self._types[type_def.name] = type_def

    def create_type(self, owner: Any, builder: Callable[[TypeRegistry], TypeDescriptor]) -> str:
        """Register ``owner``'s descriptor once and return its type name.

        ``builder`` runs at most once per registry. The name is claimed before
        the builder runs, so types that reference themselves (directly or
        through their fields) terminate.

        Raises:
            ValueError: If a different type already claimed the name.
        """
        name = owner.type_name()
        if name in self._owners:
            existing = self._owners[name]
            if existing is not owner:
                raise ValueError(f"Type '{name}' is already defined")
            return name

        self._owners[name] = owner
        try:
            descriptor = builder(self)
        except BaseException:
            del self._owners[name]
            raise
        # Edges recorded while the builder ran (an interface reached through a field)
        if isinstance(descriptor, ObjectTypeDescriptor):
            for interface_name in sorted(self._implements.get(name, ())):
                if interface_name not in descriptor.interfaces:
                    descriptor.interfaces.append(interface_name)
        self._types[name] = descriptor
        logger.debug("Registered %s type %s", descriptor.kind.lower(), name)
        return name

    def require(self, name: str) -> None:
        """Note a by-name reference to a type that may be registered later."""
        self._required.add(name)

    def missing_types(self) -> list[str]:
        """Names referenced through ``require`` that no type has claimed."""
        return sorted(name for name in self._required if name not in self._owners)

    def is_defined(self, name: str) -> bool:
        """True once a type has claimed ``name``, even while it is still being built."""
        return name in self._owners

    def add_implements(self, type_name: str, interface_name: str) -> None:
        """Record that ``type_name`` implements ``interface_name``. Idempotent."""
        interfaces = self._implements.setdefault(type_name, set())
        if interface_name in interfaces:
            return
        interfaces.add(interface_name)
        descriptor = self._types.get(type_name)
        if isinstance(descriptor, ObjectTypeDescriptor) and interface_name not in descriptor.interfaces:
            descriptor.interfaces.append(interface_name)
        logger.debug("%s implements %s", type_name, interface_name)

    def implements(self, type_name: str) -> frozenset[str]:
        """Return the interfaces a concrete type implements."""
        return frozenset(self._implements.get(type_name, ()))

    def find_implementing_types(self, interface_name: str) -> list[str]:
        """Find all concrete types recorded as implementing the interface."""
        return [name for name, interfaces in self._implements.items() if interface_name in interfaces]

    def is_possible_type(self, abstract_name: str, type_name: str) -> bool:
        """Check whether a concrete type satisfies a requested type."""
        if abstract_name == type_name:
            return True
        return abstract_name in self._implements.get(type_name, ())

    def get(self, name: str) -> TypeDescriptor | None:
        """Get a descriptor by name."""
        return self._types.get(name)

    def get_or_raise(self, name: str) -> TypeDescriptor:
        """Get a descriptor by name, raising if not found."""
        type_def = self._types.get(name)
        if type_def is None:
            raise KeyError(f"Type '{name}' not found")
        return type_def

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._types
