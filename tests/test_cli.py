"""Tests for the typed-graphql command line checker."""

from pathlib import Path

from typed_graphql.cli import declaration_to_sdl, main
from typed_graphql.parsing import InterfaceParser


class TestDeclarationToSdl:
    """Tests for rendering parsed declarations."""

    def test_render(self):
        """Test that a declaration renders as an SDL interface block."""
        [decl] = InterfaceParser().parse('''
            "Anything with an id"
            interface Node = User | Post {
                id: ID!
                title(format: String = "plain"): String as get_title
                score: Float! throws
                legacy: String deprecated("use title")
            }
        ''')
        assert declaration_to_sdl(decl) == "\n".join([
            "# possible types: User, Post",
            '"Anything with an id"',
            "interface Node {",
            "  id: ID!",
            '  title(format: String = "plain"): String',
            "  score: Float!",
            '  legacy: String @deprecated(reason: "use title")',
            "}",
        ])


class TestMain:
    """Tests for the main entry point."""

    def test_prints_sdl(self, tmp_path: Path, capsys):
        """Test that a valid file is printed as SDL."""
        source = tmp_path / "schema.gqli"
        source.write_text("interface A = X { a: Int }\ninterface B = Y | Z {}\n")

        assert main([str(source)]) == 0
        out = capsys.readouterr().out
        assert "# possible types: X\ninterface A {\n  a: Int\n}" in out
        assert "# possible types: Y, Z\ninterface B" in out

    def test_syntax_error(self, tmp_path: Path, capsys):
        """Test that a syntax error is reported with the file name."""
        source = tmp_path / "broken.gqli"
        source.write_text("interface A X { a: Int }")

        assert main([str(source)]) == 1
        err = capsys.readouterr().err
        assert str(source) in err
        assert "Syntax error at 'X'" in err

    def test_missing_file(self, tmp_path: Path, capsys):
        """Test that an unreadable file is reported."""
        assert main([str(tmp_path / "nope.gqli")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_verbose(self, tmp_path: Path):
        """Test that verbose mode still succeeds."""
        source = tmp_path / "schema.gqli"
        source.write_text("interface A = X { a: Int }")
        assert main([str(source), "--verbose"]) == 0
