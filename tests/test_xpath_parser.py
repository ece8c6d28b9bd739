"""Tests for XPath compilation."""

import pytest

from html_xpath.core.errors import ExpressionError
from html_xpath.xpath.compiler import compile_xpath


@pytest.mark.parametrize(
    "source",
    [
        "",
        "   ",
        "//",
        "//li[",
        "//li]",
        "child::",
        "foo::bar",
        "namespace::*",
        "$var",
        "unknown-function()",
        "count()",
        "count(1)",
        "contains('a')",
        "1 | //a",
        "'a'[1]",
        "(1)/a",
        "//a)",
    ],
)
def test_malformed_expressions(source: str) -> None:
    """Malformed and unsupported expressions fail at compile time."""
    with pytest.raises(ExpressionError):
        compile_xpath(source)


def test_error_reports_position() -> None:
    """Errors carry the expression and the offending offset."""
    with pytest.raises(ExpressionError) as exc_info:
        compile_xpath("//a[@href=]")
    error = exc_info.value
    assert error.expression == "//a[@href=]"
    assert error.position == 10
    assert "position 10" in str(error)


def test_selects_nodes() -> None:
    """Only node-set expressions are selectable."""
    assert compile_xpath("//a").selects_nodes
    assert compile_xpath("(//a | //b)[1]").selects_nodes
    assert not compile_xpath("count(//a)").selects_nodes
    assert not compile_xpath("1 + 2").selects_nodes


def test_descendant_shortcut_is_folded() -> None:
    """`//name` compiles to a single descendant step."""
    assert str(compile_xpath("//li")) == "/descendant::li"
    assert str(compile_xpath("//li[1]")) == "/descendant-or-self::node()/child::li[1]"


def test_abbreviations_expand() -> None:
    """Abbreviated steps expand to their full axis form."""
    assert str(compile_xpath("../@id")) == "parent::node()/attribute::id"
    assert str(compile_xpath(".")) == "self::node()"


def test_compiled_expression_is_reusable() -> None:
    """repr shows the source text."""
    expr = compile_xpath("//a")
    assert repr(expr) == "XPathExpr('//a')"
    assert expr.source == "//a"
