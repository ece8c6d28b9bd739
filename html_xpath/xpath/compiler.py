"""
Compiled XPath expressions.

Example:
    expr = compile_xpath("//a/@href")
    for position in expr.select(navigator):
        print(position.value)
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from html_xpath.core.errors import ExpressionError
from html_xpath.xpath.expr import Context, Expr
from html_xpath.xpath.navigator import NodeNavigator
from html_xpath.xpath.parser import Parser




# ==== COMPILED EXPRESSION ==== #

class XPathExpr:
    """
    A parsed XPath expression, reusable across documents and threads.

    Attributes:
        source: Original expression text
    """

    def __init__(self, source: str, root: Expr) -> None:
        self.source = source
        self._root = root

    @property
    def selects_nodes(self) -> bool:
        """Whether the expression evaluates to a node-set."""
        return self._root.returns_nodes

    def select(self, navigator: NodeNavigator) -> Iterator[NodeNavigator]:
        """
        Evaluate against navigator and yield matching positions.

        Each call starts a fresh, lazy traversal; navigator itself is never
        moved. Positions are yielded in document order without duplicates.

        Raises:
            ExpressionError: If the expression does not produce a node-set
        """
        if not self._root.returns_nodes:
            raise ExpressionError("expression does not select nodes", self.source)
        return self._root.iterate(Context(navigator.copy()))

    def evaluate(self, navigator: NodeNavigator) -> Any:
        """
        Evaluate against navigator and return the XPath value.

        Returns:
            str, float, bool, or a list of navigator positions for node-sets
        """
        return self._root.evaluate(Context(navigator.copy()))

    def __repr__(self) -> str:
        return f"XPathExpr({self.source!r})"

    def __str__(self) -> str:
        return str(self._root)




def compile_xpath(source: str) -> XPathExpr:
    """
    Compile an XPath 1.0 expression.

    Raises:
        ExpressionError: If source is not a well-formed expression
    """
    return XPathExpr(source, Parser(source).parse())
