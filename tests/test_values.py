"""Tests for literal values."""

from enum import Enum

import pytest

from typed_graphql.values import (
    BooleanValue,
    EnumValue,
    FloatValue,
    IntValue,
    ListValue,
    NullValue,
    ObjectValue,
    StringValue,
    Variable,
    literal,
)


class Color(Enum):
    RED = 1
    GREEN = 2


class TestLiteral:
    """Tests for converting Python values to literals."""

    @pytest.mark.parametrize("value, expected", [
        (None, NullValue()),
        (True, BooleanValue(True)),
        (False, BooleanValue(False)),
        (0, IntValue(0)),
        (-12, IntValue(-12)),
        (1.5, FloatValue(1.5)),
        ("plain", StringValue("plain")),
        (Color.RED, EnumValue("RED")),
    ])
    def test_scalars(self, value, expected):
        assert literal(value) == expected

    def test_bool_is_not_int(self):
        assert isinstance(literal(True), BooleanValue)

    def test_list(self):
        assert literal([1, "a", None]) == ListValue((IntValue(1), StringValue("a"), NullValue()))
        assert literal((1,)) == ListValue((IntValue(1),))

    def test_mapping_keeps_order(self):
        assert literal({"b": 1, "a": [True]}) == ObjectValue((
            ("b", IntValue(1)),
            ("a", ListValue((BooleanValue(True),))),
        ))

    def test_literal_passthrough(self):
        value = Variable("x")
        assert literal(value) is value

    def test_unsupported(self):
        with pytest.raises(TypeError, match="Cannot express object"):
            literal(object())


class TestRender:
    """Tests for canonical literal text."""

    @pytest.mark.parametrize("value, text", [
        (NullValue(), "null"),
        (IntValue(-3), "-3"),
        (FloatValue(2.5), "2.5"),
        (StringValue("plain"), '"plain"'),
        (StringValue('say "hi"\n'), '"say \\"hi\\"\\n"'),
        (StringValue("café"), '"café"'),
        (BooleanValue(True), "true"),
        (BooleanValue(False), "false"),
        (EnumValue("ASC"), "ASC"),
        (Variable("first"), "$first"),
        (ListValue((IntValue(1), IntValue(2))), "[1, 2]"),
        (ListValue(()), "[]"),
        (ObjectValue((("a", IntValue(1)), ("b", StringValue("x")))), '{a: 1, b: "x"}'),
    ])
    def test_render(self, value, text):
        assert value.render() == text


class TestToPython:
    """Tests for evaluating literals."""

    def test_scalars(self):
        assert NullValue().to_python() is None
        assert IntValue(3).to_python() == 3
        assert StringValue("s").to_python() == "s"
        assert EnumValue("ASC").to_python() == "ASC"

    def test_variable(self):
        assert Variable("n").to_python({"n": 5}) == 5
        assert Variable("n").to_python({}) is None
        assert Variable("n").to_python() is None

    def test_nested_variables(self):
        value = ObjectValue((("items", ListValue((Variable("a"), IntValue(2)))),))
        assert value.to_python({"a": 1}) == {"items": [1, 2]}
