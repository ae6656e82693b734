"""Parsing module for the interface declaration language."""

from typed_graphql.parsing.interface_lexer import InterfaceLexer
from typed_graphql.parsing.interface_parser import InterfaceDeclaration, InterfaceParser

__all__ = [
    "InterfaceDeclaration",
    "InterfaceLexer",
    "InterfaceParser",
]
