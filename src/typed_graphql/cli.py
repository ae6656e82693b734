"""Command-line checker for interface declaration files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from typed_graphql.parsing import InterfaceDeclaration, InterfaceParser
from typed_graphql.types import FieldDescriptor, InputValueDescriptor, render_type_block


def declaration_to_sdl(decl: InterfaceDeclaration) -> str:
    """Render a parsed (unresolved) declaration as SDL."""
    fields = [
        FieldDescriptor(
            name=f.name,
            type_ref=str(f.type.unwrap()),
            description=f.description,
            args=[
                InputValueDescriptor(
                    name=arg.name,
                    type_ref=str(arg.type),
                    description=arg.description,
                    default_value=arg.default.render() if arg.default is not None else None,
                )
                for arg in f.args
            ],
            deprecation=f.deprecation,
        )
        for f in decl.fields
    ]
    header = f"# possible types: {', '.join(decl.variants)}"
    return header + "\n" + render_type_block(f"interface {decl.name}", decl.description, fields)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Check an interface declaration file and print it as GraphQL SDL"
    )
    arg_parser.add_argument(
        "file",
        type=Path,
        help="Interface declaration file",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = arg_parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        text = args.file.read_text()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        declarations = InterfaceParser().parse(text)
    except SyntaxError as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1

    print("\n\n".join(declaration_to_sdl(decl) for decl in declarations))
    return 0


if __name__ == "__main__":
    sys.exit(main())
