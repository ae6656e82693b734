"""GraphQL interfaces backed by a closed set of concrete types.

An interface is declared once, from an ``InterfaceSpec`` or directly as a
subclass of ``Interface``::

    class Node(Interface, variants=[User, Post], fields=[
        FieldSpec("id", non_null("ID")),
        FieldSpec("title", "String", args=[ArgSpec("format", "String", default="plain")]),
    ]):
        \"\"\"Anything with an id.\"\"\"

Declaring the class checks every field against every variant. Instances
wrap exactly one variant value (``Node(user)``) and route field requests and
inline fragments to it. ``Node.create_type_info(registry)`` registers the
interface descriptor and the "implements" edges of its variants.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Sequence

from typed_graphql.context import Context, Field, do_resolve, resolve_output
from typed_graphql.errors import (
    FieldNotFound,
    FieldResolutionError,
    GraphQLError,
    InterfaceDefinitionError,
    UnrecognizedInlineFragment,
)
from typed_graphql.types import (
    FieldDescriptor,
    InputValueDescriptor,
    InterfaceTypeDescriptor,
    TypeRef,
    TypeRegistry,
    is_fallible,
    type_ref,
)
from typed_graphql.values import Value, literal

logger = logging.getLogger(__name__)


# ---- Declarations ----


@dataclass(frozen=True)
class ArgSpec:
    """An argument of an interface field.

    An argument without a default is required unless its type is nullable.
    """

    name: str
    type: TypeRef
    description: str | None = None
    default: Value | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", type_ref(self.type))
        if self.default is not None:
            object.__setattr__(self, "default", literal(self.default))

    @property
    def required(self) -> bool:
        return self.default is None and not self.type.allows_absence


@dataclass(frozen=True)
class FieldSpec:
    """A field of an interface and the variant method that resolves it."""

    name: str
    type: TypeRef
    method: str | None = None
    description: str | None = None
    deprecation: str | None = None
    args: tuple[ArgSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", type_ref(self.type))
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def method_name(self) -> str:
        return self.method or self.name

    @property
    def fallible(self) -> bool:
        return is_fallible(self.type)

    def get_arg(self, name: str) -> ArgSpec | None:
        for arg in self.args:
            if arg.name == name:
                return arg
        return None


@dataclass(frozen=True)
class VariantSpec:
    """One concrete type allowed to satisfy an interface."""

    type: Any

    @property
    def type_name(self) -> str:
        return self.type.type_name()


@dataclass(frozen=True)
class InterfaceSpec:
    name: str
    fields: tuple[FieldSpec, ...]
    variants: tuple[VariantSpec, ...]
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(
            self,
            "variants",
            tuple(v if isinstance(v, VariantSpec) else VariantSpec(v) for v in self.variants),
        )

    def get_field(self, name: str) -> FieldSpec | None:
        """Return the first field declared with ``name``."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_variant(self, type_name: str) -> VariantSpec | None:
        for v in self.variants:
            if v.type_name == type_name:
                return v
        return None


# ---- Compilation ----


def _provides(cls: type, name: str) -> bool:
    """Whether instances of ``cls`` expose ``name``.

    Methods and class attributes are found on the class; instance attributes
    are found through ``__fields__`` or the dataclass fields.
    """
    if hasattr(cls, name) or name in getattr(cls, "__fields__", {}):
        return True
    if dataclasses.is_dataclass(cls):
        return any(f.name == name for f in dataclasses.fields(cls))
    return False


def _check_spec(spec: InterfaceSpec) -> None:
    """Reject declarations that could not be served."""
    if not spec.variants:
        raise InterfaceDefinitionError(f"Interface '{spec.name}' must have at least one variant")

    seen_fields: set[str] = set()
    for f in spec.fields:
        if f.name in seen_fields:
            raise InterfaceDefinitionError(f"Interface '{spec.name}': duplicate field '{f.name}'")
        seen_fields.add(f.name)
        arg_names = [a.name for a in f.args]
        if len(arg_names) != len(set(arg_names)):
            raise InterfaceDefinitionError(
                f"Interface '{spec.name}': duplicate argument on field '{f.name}'"
            )

    seen_types: set[str] = set()
    for variant in spec.variants:
        if not hasattr(variant.type, "type_name") or not hasattr(variant.type, "create_type_info"):
            raise InterfaceDefinitionError(
                f"Interface '{spec.name}': {variant.type!r} is not a GraphQL object type"
            )
        if variant.type_name in seen_types:
            raise InterfaceDefinitionError(
                f"Interface '{spec.name}': possible type '{variant.type_name}' is listed twice"
            )
        seen_types.add(variant.type_name)
        for f in spec.fields:
            if not _provides(variant.type, f.method_name):
                raise InterfaceDefinitionError(
                    f"Interface '{spec.name}': type '{variant.type_name}' "
                    f"does not implement '{f.method_name}' for field '{f.name}'"
                )


async def _invoke(obj: Any, method_name: str, *args: Any, **kwargs: Any) -> Any:
    attr = getattr(obj, method_name)
    if not callable(attr):
        return attr
    result = attr(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _make_delegate(method_name: str) -> Any:
    async def delegate(self: Interface, *args: Any, **kwargs: Any) -> Any:
        return await _invoke(self._value, method_name, *args, **kwargs)

    delegate.__name__ = method_name
    delegate.__qualname__ = method_name
    return delegate


def _compile(cls: type[Interface], spec: InterfaceSpec) -> None:
    _check_spec(spec)
    cls._spec = spec
    cls._variant_by_type = {v.type: v for v in spec.variants}
    for f in spec.fields:
        # Names used by the Interface API itself are only reachable through resolve_field
        if f.method_name not in cls.__dict__ and not hasattr(Interface, f.method_name):
            setattr(cls, f.method_name, _make_delegate(f.method_name))
    logger.debug(
        "Compiled interface %s: %d fields over %s",
        spec.name,
        len(spec.fields),
        ", ".join(v.type_name for v in spec.variants),
    )


def define_interface(spec: InterfaceSpec) -> type[Interface]:
    """Compile an ``InterfaceSpec`` into a new ``Interface`` subclass."""
    return type(spec.name, (Interface,), {"__doc__": spec.description}, spec=spec)


# ---- Runtime ----


class Interface:
    """A value holding exactly one of an interface's variants."""

    _spec: ClassVar[InterfaceSpec]
    _variant_by_type: ClassVar[dict[Any, VariantSpec]]

    def __init_subclass__(
        cls,
        *,
        spec: InterfaceSpec | None = None,
        variants: Sequence[Any] | None = None,
        fields: Iterable[FieldSpec] = (),
        name: str | None = None,
        description: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if spec is None:
            if variants is None:
                if hasattr(cls, "_spec"):
                    return
                raise InterfaceDefinitionError(f"Interface '{cls.__name__}' must declare its variants")
            if description is None:
                doc = cls.__dict__.get("__doc__")
                description = inspect.cleandoc(doc) if doc else None
            spec = InterfaceSpec(
                name=name or cls.__name__,
                fields=tuple(fields),
                variants=tuple(VariantSpec(v) for v in variants),
                description=description,
            )
        _compile(cls, spec)

    def __init__(self, value: Any) -> None:
        if not hasattr(type(self), "_spec"):
            raise TypeError("Interface cannot be instantiated without variants")
        if isinstance(value, Interface):
            value = value.value
        variant = self._variant_by_type.get(type(value))
        if variant is None:
            raise TypeError(f"{type(value).__name__} is not a possible type of {self.type_name()}")
        self._value = value
        self._variant = variant

    @classmethod
    def from_value(cls, value: Any) -> Interface:
        """Wrap a concrete variant value."""
        return cls(value)

    @classmethod
    def spec(cls) -> InterfaceSpec:
        return cls._spec

    @classmethod
    def type_name(cls) -> str:
        """The interface's own GraphQL name."""
        return cls._spec.name

    @property
    def value(self) -> Any:
        return self._value

    @property
    def variant(self) -> VariantSpec:
        return self._variant

    def runtime_type_name(self) -> str:
        """The GraphQL name of the concrete type currently held."""
        return self._value.type_name()

    # ---- Schema ----

    @classmethod
    def create_type_info(cls, registry: TypeRegistry) -> str:
        """Register the interface and its variants once; return the interface name."""
        return registry.create_type(cls, cls._build_type)

    @classmethod
    def describe(cls, registry: TypeRegistry) -> InterfaceTypeDescriptor:
        """Register the interface if needed and return its descriptor."""
        descriptor = registry.get_or_raise(cls.create_type_info(registry))
        assert isinstance(descriptor, InterfaceTypeDescriptor)
        return descriptor

    @classmethod
    def _build_type(cls, registry: TypeRegistry) -> InterfaceTypeDescriptor:
        spec = cls._spec
        possible_types: list[str] = []
        try:
            for variant in spec.variants:
                variant.type.create_type_info(registry)
                registry.add_implements(variant.type_name, spec.name)
                possible_types.append(variant.type_name)

            fields = [
                FieldDescriptor(
                    name=f.name,
                    description=f.description,
                    args=[
                        InputValueDescriptor(
                            name=arg.name,
                            description=arg.description,
                            type_ref=arg.type.create_type_info(registry),
                            default_value=arg.default.render() if arg.default is not None else None,
                        )
                        for arg in f.args
                    ],
                    type_ref=f.type.unwrap().create_type_info(registry),
                    deprecation=f.deprecation,
                )
                for f in spec.fields
            ]
        except (KeyError, ValueError) as e:
            raise InterfaceDefinitionError(f"Interface '{spec.name}': {e}") from e

        return InterfaceTypeDescriptor(
            name=spec.name,
            description=spec.description,
            fields=fields,
            possible_types=possible_types,
        )

    # ---- Resolution ----

    def _bind_arguments(self, ctx: Context, spec: FieldSpec) -> dict[str, Any]:
        return {arg.name: ctx.param_value(arg.name, arg.type, arg.default) for arg in spec.args}

    async def resolve_field(self, ctx: Context, field: Field) -> Any:
        """Resolve ``field`` against the active variant.

        Raises:
            FieldNotFound: If the interface declares no such field.
            ArgumentBindingError: If an argument is missing or malformed.
            FieldResolutionError: If the method of a fallible field fails.
        """
        spec = self._spec.get_field(field.name)
        if spec is None:
            raise FieldNotFound(field.name, self.type_name(), field.position)

        field_ctx = ctx.with_field(field)
        kwargs = self._bind_arguments(field_ctx, spec)

        try:
            value = await _invoke(self._value, spec.method_name, **kwargs)
        except GraphQLError as e:
            raise e.with_position(field.position)
        except Exception as e:
            if not spec.fallible:
                raise
            raise FieldResolutionError(str(e) or type(e).__name__, field.position) from e

        try:
            return await resolve_output(value, field_ctx)
        except GraphQLError as e:
            raise e.with_position(field.position)

    async def resolve_inline_fragment(self, name: str, ctx: Context, result: dict[str, Any]) -> None:
        """Resolve ``... on name`` into ``result`` when the active variant is ``name``.

        A declared variant that is not active contributes nothing.

        Raises:
            UnrecognizedInlineFragment: If ``name`` is not a declared variant.
        """
        for variant in self._spec.variants:
            if name == variant.type_name:
                if self._variant is variant:
                    await do_resolve(ctx, self._value, result)
                return
        raise UnrecognizedInlineFragment(self.type_name(), name)

    def __repr__(self) -> str:
        return f"{self.type_name()}({self._value!r})"

