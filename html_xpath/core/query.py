"""
Query helpers: run an XPath expression against a document node.

Example:
    doc = parse_html("<ul><li>A</li><li>B</li></ul>")
    items = find(doc, "//li")
    first = find_one(doc, "//li[2]")
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from html_xpath.core.dom import Node
from html_xpath.core.errors import ExpressionError
from html_xpath.core.navigator import HtmlNodeNavigator
from html_xpath.utils.logging import get_logger
from html_xpath.xpath.compiler import XPathExpr, compile_xpath

logger = get_logger(__name__)




def create_xpath_navigator(top: Node) -> HtmlNodeNavigator:
    """Create a navigator positioned on top, with top as its root."""
    return HtmlNodeNavigator(top)




def _select(top: Node, expr: str) -> Iterator[Node]:
    try:
        compiled: XPathExpr = compile_xpath(expr)
    except ExpressionError as exc:
        logger.debug("xpath_compile_failed", extra={"expr": expr, "error": str(exc)})
        raise

    # Compile and type errors surface here, before any node is visited
    positions = compiled.select(create_xpath_navigator(top))
    return (position.current for position in positions)  # type: ignore[attr-defined]




# ==== PUBLIC API ==== #

def find(top: Node, expr: str) -> list[Node]:
    """
    Return every node matching expr, in document order.

    Args:
        top: Node the query is evaluated against
        expr: XPath expression selecting nodes

    Returns:
        Matching nodes (empty list when nothing matches)

    Raises:
        ExpressionError: If expr is malformed or does not select nodes
    """
    return list(_select(top, expr))




def find_one(top: Node, expr: str) -> Node | None:
    """
    Return the first node matching expr, or None.

    Evaluation stops as soon as the first match is produced.

    Raises:
        ExpressionError: If expr is malformed or does not select nodes
    """
    return next(_select(top, expr), None)




def find_each(top: Node, expr: str, callback: Callable[[int, Node], object]) -> None:
    """
    Call callback(index, node) for every node matching expr.

    Nodes are visited in document order with a zero-based index; no result
    list is kept.

    Raises:
        ExpressionError: If expr is malformed or does not select nodes
    """
    for index, node in enumerate(_select(top, expr)):
        callback(index, node)
