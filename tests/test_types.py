"""Tests for type references, descriptors and the type registry."""

import pytest

from typed_graphql.types import (
    BUILTIN_SCALARS,
    Fallible,
    FieldDescriptor,
    InputValueDescriptor,
    InterfaceTypeDescriptor,
    ListType,
    NamedType,
    NonNullType,
    ObjectTypeDescriptor,
    ScalarTypeDescriptor,
    TypeRegistry,
    fallible,
    is_fallible,
    list_of,
    non_null,
    type_ref,
)


class Owner:
    """Minimal registry owner."""

    builds = 0

    @classmethod
    def type_name(cls):
        return "Owned"

    @classmethod
    def create_type_info(cls, registry):
        return registry.create_type(cls, cls.build)

    @classmethod
    def build(cls, registry):
        cls.builds += 1
        return ObjectTypeDescriptor(name="Owned")


class TestTypeRefs:
    """Tests for type reference wrappers."""

    def test_type_ref_coercion(self):
        assert type_ref("Int") == NamedType("Int")
        ref = NonNullType(NamedType("Int"))
        assert type_ref(ref) is ref

    def test_helpers(self):
        assert non_null("ID") == NonNullType(NamedType("ID"))
        assert list_of(non_null("ID")) == ListType(NonNullType(NamedType("ID")))
        assert fallible("Float") == Fallible(NamedType("Float"))

    def test_str(self):
        assert str(non_null(list_of(non_null("String")))) == "[String!]!"
        assert str(fallible(non_null("Float"))) == "Float!"

    def test_class_name(self):
        assert NamedType(Owner).name == "Owned"

    def test_allows_absence(self):
        assert NamedType("Int").allows_absence is True
        assert list_of("Int").allows_absence is True
        assert non_null("Int").allows_absence is False
        assert fallible(non_null("Int")).allows_absence is False

    def test_unwrap_strips_fallible(self):
        assert fallible(non_null("Float")).unwrap() == non_null("Float")
        assert non_null("Float").unwrap() == non_null("Float")

    def test_named_type(self):
        assert non_null(list_of(fallible("Int"))).named_type() == NamedType("Int")

    def test_is_fallible(self):
        assert is_fallible(fallible("Int")) is True
        assert is_fallible(non_null("Int")) is False

    def test_create_type_info(self):
        registry = TypeRegistry()
        assert non_null(list_of(NamedType(Owner))).create_type_info(registry) == "[Owned]!"
        assert "Owned" in registry
        assert fallible(list_of("Widget")).create_type_info(registry) == "[Widget]"
        assert registry.missing_types() == ["Widget"]


class TestDescriptors:
    """Tests for descriptor helpers and SDL rendering."""

    def test_kinds(self):
        assert ScalarTypeDescriptor(name="Int").kind == "SCALAR"
        assert ObjectTypeDescriptor(name="User").kind == "OBJECT"
        interface = InterfaceTypeDescriptor(name="Node")
        assert interface.kind == "INTERFACE"
        assert interface.is_abstract is True
        assert ObjectTypeDescriptor(name="User").is_abstract is False

    def test_input_value_sdl(self):
        arg = InputValueDescriptor(name="format", type_ref="String", default_value='"plain"')
        assert arg.to_sdl() == 'format: String = "plain"'
        arg.description = "Output format"
        assert arg.to_sdl() == '"Output format" format: String = "plain"'

    def test_interface_sdl(self):
        descriptor = InterfaceTypeDescriptor(
            name="Node",
            description="Anything with an id.",
            fields=[
                FieldDescriptor(name="id", type_ref="ID!"),
                FieldDescriptor(
                    name="title",
                    type_ref="String",
                    description="The title",
                    args=[InputValueDescriptor(name="format", type_ref="String", default_value='"plain"')],
                ),
                FieldDescriptor(name="legacy", type_ref="String", deprecation="use title"),
            ],
            possible_types=["User", "Post"],
        )
        assert descriptor.to_sdl() == "\n".join([
            '"Anything with an id."',
            "interface Node {",
            "  id: ID!",
            '  "The title"',
            '  title(format: String = "plain"): String',
            '  legacy: String @deprecated(reason: "use title")',
            "}",
        ])

    def test_multiline_description(self):
        descriptor = ObjectTypeDescriptor(name="User", description="One\nTwo")
        assert descriptor.to_sdl() == '"""\nOne\nTwo\n"""\ntype User'

    def test_object_sdl_implements(self):
        descriptor = ObjectTypeDescriptor(
            name="User",
            fields=[FieldDescriptor(name="id", type_ref="ID!")],
            interfaces=["Node", "Named"],
        )
        assert descriptor.to_sdl() == "type User implements Node & Named {\n  id: ID!\n}"

    def test_get_field_and_arg(self):
        f = FieldDescriptor(name="f", type_ref="Int", args=[InputValueDescriptor(name="a", type_ref="Int")])
        descriptor = InterfaceTypeDescriptor(name="I", fields=[f])
        assert descriptor.get_field("f") is f
        assert descriptor.get_field("g") is None
        assert f.get_arg("a").name == "a"
        assert f.get_arg("b") is None


class TestTypeRegistry:
    """Tests for the type registry."""

    @pytest.fixture
    def registry(self):
        Owner.builds = 0
        return TypeRegistry()

    def test_builtin_scalars(self, registry):
        for name in BUILTIN_SCALARS:
            assert isinstance(registry.get(name), ScalarTypeDescriptor)
            assert registry.is_defined(name)

    def test_register(self, registry):
        registry.register(ScalarTypeDescriptor(name="DateTime"))
        assert "DateTime" in registry
        with pytest.raises(ValueError, match="already defined"):
            registry.register(ScalarTypeDescriptor(name="DateTime"))

    def test_register_builtin_conflict(self, registry):
        with pytest.raises(ValueError, match="already defined"):
            registry.register(ObjectTypeDescriptor(name="String"))

    def test_create_type_once(self, registry):
        assert Owner.create_type_info(registry) == "Owned"
        assert Owner.create_type_info(registry) == "Owned"
        assert Owner.builds == 1

    def test_create_type_per_registry(self, registry):
        Owner.create_type_info(registry)
        Owner.create_type_info(TypeRegistry())
        assert Owner.builds == 2

    def test_create_type_conflict(self, registry):
        class Other(Owner):
            pass

        Owner.create_type_info(registry)
        with pytest.raises(ValueError, match="Type 'Owned' is already defined"):
            Other.create_type_info(registry)

    def test_name_claimed_during_build(self, registry):
        seen = []

        class Recursive:
            @classmethod
            def type_name(cls):
                return "Recursive"

            @classmethod
            def build(cls, reg):
                seen.append(reg.is_defined("Recursive"))
                # Referencing itself returns immediately
                seen.append(reg.create_type(cls, cls.build))
                return ObjectTypeDescriptor(name="Recursive")

        assert registry.create_type(Recursive, Recursive.build) == "Recursive"
        assert seen == [True, "Recursive"]

    def test_failed_build_rolls_back(self, registry):
        class Failing:
            @classmethod
            def type_name(cls):
                return "Failing"

            @classmethod
            def build(cls, reg):
                raise ValueError("broken")

        with pytest.raises(ValueError, match="broken"):
            registry.create_type(Failing, Failing.build)
        assert registry.is_defined("Failing") is False
        assert "Failing" not in registry

    def test_missing_types(self, registry):
        registry.require("Int")
        registry.require("Widget")
        registry.require("Gadget")
        assert registry.missing_types() == ["Gadget", "Widget"]
        registry.register(ObjectTypeDescriptor(name="Widget"))
        assert registry.missing_types() == ["Gadget"]

    def test_add_implements(self, registry):
        Owner.create_type_info(registry)
        registry.add_implements("Owned", "Node")
        registry.add_implements("Owned", "Node")
        registry.add_implements("Owned", "Named")
        assert registry.implements("Owned") == frozenset({"Node", "Named"})
        assert registry.get("Owned").interfaces == ["Node", "Named"]

    def test_implements_unknown(self, registry):
        assert registry.implements("Nobody") == frozenset()
        assert registry.find_implementing_types("Node") == []

    def test_find_implementing_types(self, registry):
        registry.add_implements("User", "Node")
        registry.add_implements("Post", "Node")
        registry.add_implements("Post", "Named")
        assert registry.find_implementing_types("Node") == ["User", "Post"]
        assert registry.find_implementing_types("Named") == ["Post"]

    def test_is_possible_type(self, registry):
        registry.add_implements("User", "Node")
        assert registry.is_possible_type("Node", "User") is True
        assert registry.is_possible_type("User", "User") is True
        assert registry.is_possible_type("Node", "Post") is False

    def test_get_or_raise(self, registry):
        assert registry.get("Nope") is None
        with pytest.raises(KeyError, match="Type 'Nope' not found"):
            registry.get_or_raise("Nope")

    def test_list_types(self, registry):
        Owner.create_type_info(registry)
        assert registry.list_types() == list(BUILTIN_SCALARS) + ["Owned"]
