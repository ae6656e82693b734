"""Parser for the interface declaration language.

Example::

    "Anything with an id"
    interface Node = User | Post {
        id: ID!
        "Title in the requested format"
        title(format: String = "plain"): String as get_title
        score: Float! throws
        legacy: String deprecated("use title")
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import ply.yacc as yacc

from typed_graphql.errors import InterfaceDefinitionError
from typed_graphql.interface import ArgSpec, FieldSpec, Interface, InterfaceSpec, define_interface
from typed_graphql.parsing.interface_lexer import InterfaceLexer
from typed_graphql.types import Fallible, ListType, NamedType, NonNullType, TypeRef
from typed_graphql.values import (
    BooleanValue,
    EnumValue,
    FloatValue,
    IntValue,
    ListValue,
    NullValue,
    ObjectValue,
    StringValue,
)


@dataclass
class InterfaceDeclaration:
    """An interface as written, before variant names are resolved to classes."""

    name: str
    variants: list[str]
    fields: list[FieldSpec] = field(default_factory=list)
    description: str | None = None
    line: int = 0


@dataclass
class _Modifiers:
    method: str | None = None
    throws: bool = False
    deprecation: str | None = None


class InterfaceParser:
    """Parser for interface declarations."""

    tokens = InterfaceLexer.tokens

    def __init__(self) -> None:
        self.lexer = InterfaceLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    # ---- Document ----

    def p_document(self, p: yacc.YaccProduction) -> None:
        """document : definition_list"""
        p[0] = p[1]

    def p_document_empty(self, p: yacc.YaccProduction) -> None:
        """document : empty"""
        p[0] = []

    def p_definition_list_single(self, p: yacc.YaccProduction) -> None:
        """definition_list : definition"""
        p[0] = [p[1]]

    def p_definition_list_multiple(self, p: yacc.YaccProduction) -> None:
        """definition_list : definition_list definition"""
        p[0] = p[1] + [p[2]]

    def p_definition(self, p: yacc.YaccProduction) -> None:
        """definition : description_opt INTERFACE IDENTIFIER EQUALS variant_list LBRACE field_list_opt RBRACE"""
        p[0] = InterfaceDeclaration(
            name=p[3],
            variants=p[5],
            fields=p[7],
            description=p[1],
            line=p.lineno(2),
        )

    def p_variant_list_single(self, p: yacc.YaccProduction) -> None:
        """variant_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_variant_list_multiple(self, p: yacc.YaccProduction) -> None:
        """variant_list : variant_list PIPE IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    # ---- Fields ----

    def p_field_list_opt(self, p: yacc.YaccProduction) -> None:
        """field_list_opt : field_list
                          | empty"""
        p[0] = p[1] or []

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list field"""
        p[0] = p[1] + [p[2]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : description_opt IDENTIFIER args_opt COLON type_ref modifier_list"""
        mods: _Modifiers = p[6]
        field_type: TypeRef = Fallible(p[5]) if mods.throws else p[5]
        p[0] = FieldSpec(
            name=p[2],
            type=field_type,
            method=mods.method,
            description=p[1],
            deprecation=mods.deprecation,
            args=tuple(p[3]),
        )

    def p_modifier_list_empty(self, p: yacc.YaccProduction) -> None:
        """modifier_list : empty"""
        p[0] = _Modifiers()

    def p_modifier_list_method(self, p: yacc.YaccProduction) -> None:
        """modifier_list : modifier_list AS IDENTIFIER"""
        p[0] = p[1]
        p[0].method = p[3]

    def p_modifier_list_throws(self, p: yacc.YaccProduction) -> None:
        """modifier_list : modifier_list THROWS"""
        p[0] = p[1]
        p[0].throws = True

    def p_modifier_list_deprecated(self, p: yacc.YaccProduction) -> None:
        """modifier_list : modifier_list DEPRECATED"""
        p[0] = p[1]
        p[0].deprecation = "No longer supported"

    def p_modifier_list_deprecated_reason(self, p: yacc.YaccProduction) -> None:
        """modifier_list : modifier_list DEPRECATED LPAREN STRING RPAREN"""
        p[0] = p[1]
        p[0].deprecation = p[4]

    # ---- Arguments ----

    def p_args_opt_empty(self, p: yacc.YaccProduction) -> None:
        """args_opt : empty
                    | LPAREN RPAREN"""
        p[0] = []

    def p_args_opt(self, p: yacc.YaccProduction) -> None:
        """args_opt : LPAREN arg_list RPAREN"""
        p[0] = p[2]

    def p_arg_list_single(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg"""
        p[0] = [p[1]]

    def p_arg_list_multiple(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg_list arg"""
        p[0] = p[1] + [p[2]]

    def p_arg(self, p: yacc.YaccProduction) -> None:
        """arg : description_opt IDENTIFIER COLON type_ref"""
        p[0] = ArgSpec(name=p[2], type=p[4], description=p[1])

    def p_arg_default(self, p: yacc.YaccProduction) -> None:
        """arg : description_opt IDENTIFIER COLON type_ref EQUALS value"""
        p[0] = ArgSpec(name=p[2], type=p[4], description=p[1], default=p[6])

    # ---- Types ----

    def p_type_ref_named(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER"""
        p[0] = NamedType(p[1])

    def p_type_ref_list(self, p: yacc.YaccProduction) -> None:
        """type_ref : LBRACKET type_ref RBRACKET"""
        p[0] = ListType(p[2])

    def p_type_ref_non_null(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER BANG"""
        p[0] = NonNullType(NamedType(p[1]))

    def p_type_ref_list_non_null(self, p: yacc.YaccProduction) -> None:
        """type_ref : LBRACKET type_ref RBRACKET BANG"""
        p[0] = NonNullType(ListType(p[2]))

    # ---- Literal values ----

    def p_value_null(self, p: yacc.YaccProduction) -> None:
        """value : NULL"""
        p[0] = NullValue()

    def p_value_boolean(self, p: yacc.YaccProduction) -> None:
        """value : TRUE
                 | FALSE"""
        p[0] = BooleanValue(p[1] == "true")

    def p_value_integer(self, p: yacc.YaccProduction) -> None:
        """value : INTEGER"""
        p[0] = IntValue(p[1])

    def p_value_float(self, p: yacc.YaccProduction) -> None:
        """value : FLOAT"""
        p[0] = FloatValue(p[1])

    def p_value_string(self, p: yacc.YaccProduction) -> None:
        """value : STRING
                 | BLOCK_STRING"""
        p[0] = StringValue(p[1])

    def p_value_enum(self, p: yacc.YaccProduction) -> None:
        """value : IDENTIFIER"""
        p[0] = EnumValue(p[1])

    def p_value_list(self, p: yacc.YaccProduction) -> None:
        """value : LBRACKET value_list RBRACKET"""
        p[0] = ListValue(tuple(p[2]))

    def p_value_list_empty(self, p: yacc.YaccProduction) -> None:
        """value : LBRACKET RBRACKET"""
        p[0] = ListValue(())

    def p_value_list_items_single(self, p: yacc.YaccProduction) -> None:
        """value_list : value"""
        p[0] = [p[1]]

    def p_value_list_items_multiple(self, p: yacc.YaccProduction) -> None:
        """value_list : value_list value"""
        p[0] = p[1] + [p[2]]

    def p_value_object(self, p: yacc.YaccProduction) -> None:
        """value : LBRACE object_field_list RBRACE"""
        p[0] = ObjectValue(tuple(p[2]))

    def p_value_object_empty(self, p: yacc.YaccProduction) -> None:
        """value : LBRACE RBRACE"""
        p[0] = ObjectValue(())

    def p_object_field_list_single(self, p: yacc.YaccProduction) -> None:
        """object_field_list : IDENTIFIER COLON value"""
        p[0] = [(p[1], p[3])]

    def p_object_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """object_field_list : object_field_list IDENTIFIER COLON value"""
        p[0] = p[1] + [(p[2], p[4])]

    # ---- Shared ----

    def p_description_opt(self, p: yacc.YaccProduction) -> None:
        """description_opt : STRING
                           | BLOCK_STRING
                           | empty"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> list[InterfaceDeclaration]:
        """Parse interface declarations."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.lexer.lineno = 1
        declarations = self.parser.parse(data, lexer=self.lexer.lexer)
        if declarations is None:
            declarations = []
        return declarations

    def compile(self, data: str, types: Mapping[str, Any] | Iterable[Any]) -> list[type[Interface]]:
        """Parse declarations and compile them against concrete types.

        Args:
            data: Interface declarations.
            types: Concrete object types, as a name -> class mapping or an
                iterable of classes (keyed by their GraphQL name).

        Returns:
            The compiled Interface classes, in declaration order.

        Raises:
            SyntaxError: If the text cannot be parsed.
            InterfaceDefinitionError: If a variant is unknown or a
                declaration is malformed.
        """
        known = _type_map(types)
        compiled: list[type[Interface]] = []
        for decl in self.parse(data):
            variants = []
            for name in decl.variants:
                cls = known.get(name)
                if cls is None:
                    raise InterfaceDefinitionError(
                        f"Interface '{decl.name}' (line {decl.line}): unknown possible type '{name}'"
                    )
                variants.append(cls)
            spec = InterfaceSpec(
                name=decl.name,
                description=decl.description,
                fields=tuple(_resolve_field(f, known) for f in decl.fields),
                variants=tuple(variants),
            )
            interface = define_interface(spec)
            known[decl.name] = interface
            compiled.append(interface)
        return compiled


def _type_map(types: Mapping[str, Any] | Iterable[Any]) -> dict[str, Any]:
    if isinstance(types, Mapping):
        return dict(types)
    return {t.type_name(): t for t in types}


def _resolve_type_ref(ref: TypeRef, known: Mapping[str, Any]) -> TypeRef:
    """Replace type names with known classes; other names stay by-name references."""
    if isinstance(ref, NamedType):
        if isinstance(ref.of, str) and ref.of in known:
            return NamedType(known[ref.of])
        return ref
    if isinstance(ref, ListType):
        return ListType(_resolve_type_ref(ref.of_type, known))
    if isinstance(ref, NonNullType):
        return NonNullType(_resolve_type_ref(ref.of_type, known))
    return Fallible(_resolve_type_ref(ref.of_type, known))


def _resolve_field(spec: FieldSpec, known: Mapping[str, Any]) -> FieldSpec:
    return FieldSpec(
        name=spec.name,
        type=_resolve_type_ref(spec.type, known),
        method=spec.method,
        description=spec.description,
        deprecation=spec.deprecation,
        args=tuple(
            ArgSpec(
                name=arg.name,
                type=_resolve_type_ref(arg.type, known),
                description=arg.description,
                default=arg.default,
            )
            for arg in spec.args
        ),
    )
