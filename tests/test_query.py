"""Tests for find, find_one and find_each."""

import pytest

from html_xpath.core.dom import NodeKind
from html_xpath.core.errors import ExpressionError
from html_xpath.core.query import find, find_each, find_one
from html_xpath.core.render import inner_text, output_html, select_attr
from html_xpath.utils.parsing import parse_html

SAMPLE_HTML = """<!DOCTYPE html><html lang="en-US">
<head>
<title>Hello,World!</title>
</head>
<body>
<div class="container">
<header>
\t<!-- Logo -->
   <h1>City Gallery</h1>
</header>
<nav>
  <ul>
    <li><a href="#">London</a></li>
    <li><a href="#">Paris</a></li>
    <li><a href="#">Tokyo</a></li>
  </ul>
</nav>
<article>
  <h1>London</h1>
  <img src="pic_mountain.jpg" alt="Mountain View">
  <p>London is the capital city of England.</p>
  <p>Standing on the River Thames, London has been a major settlement for two millennia.</p>
</article>
<footer>Copyright &copy; W3Schools.com</footer>
</div>
</body>
</html>
"""


def test_find_one_html_lang() -> None:
    """The html element carries its lang attribute."""
    doc = parse_html(SAMPLE_HTML)
    node = find_one(doc, "//html")
    assert node is not None
    assert select_attr(node, "lang") == "en-US"


def test_find_each_matches_find() -> None:
    """find_each visits exactly the nodes find returns, with zero-based indexes."""
    doc = parse_html(SAMPLE_HTML)
    seen = []
    find_each(doc, "//li", lambda index, node: seen.append((index, node)))

    nodes = find(doc, "//li")
    assert len(nodes) == 3
    assert [index for index, _ in seen] == [0, 1, 2]
    assert [node for _, node in seen] == nodes


def test_find_one_is_first_of_find() -> None:
    """find_one returns the head of find's result."""
    doc = parse_html(SAMPLE_HTML)
    assert find_one(doc, "//li") is find(doc, "//li")[0]
    assert inner_text(find_one(doc, "//li")) == "London"


def test_header_comment_projection() -> None:
    """Comments are left out of inner text but kept in markup."""
    doc = parse_html(SAMPLE_HTML)
    header = find_one(doc, "//header")
    assert "Logo" not in inner_text(header)
    assert "City Gallery" in inner_text(header)
    assert "Logo" in output_html(header)


def test_attribute_then_parent_returns_owner() -> None:
    """Stepping up from an attribute lands on its owner element."""
    doc = parse_html('<html><b attr="1"></b></html>')
    node = find_one(doc, "//b/@attr/..")
    assert node is not None
    assert node.kind is NodeKind.ELEMENT
    assert node.data == "b"


def test_attribute_selection_yields_owner_nodes() -> None:
    """Selecting attributes returns the elements that carry them."""
    doc = parse_html(SAMPLE_HTML)
    owners = find(doc, "//a/@href")
    assert [inner_text(node) for node in owners] == ["London", "Paris", "Tokyo"]


def test_no_match() -> None:
    """Misses are an empty list, None and zero callbacks."""
    doc = parse_html(SAMPLE_HTML)
    calls = []
    assert find(doc, "//table") == []
    assert find_one(doc, "//table") is None
    find_each(doc, "//table", lambda index, node: calls.append(index))
    assert calls == []


def test_document_order_across_branches() -> None:
    """Results come back in document order without duplicates."""
    doc = parse_html(SAMPLE_HTML)
    nodes = find(doc, "//h1 | //article/h1 | //footer")
    assert [inner_text(node) for node in nodes] == [
        "City Gallery",
        "London",
        "Copyright © W3Schools.com",
    ]


def test_positional_and_text_predicates() -> None:
    """Predicates filter by position and by string value."""
    doc = parse_html(SAMPLE_HTML)
    assert inner_text(find_one(doc, "//li[2]")) == "Paris"
    assert inner_text(find_one(doc, "//li[last()]")) == "Tokyo"
    assert inner_text(find_one(doc, "//a[text()='Tokyo']/..")) == "Tokyo"
    assert len(find(doc, "//article/p")) == 2
    assert find_one(doc, "//img[@alt='Mountain View']") is not None


def test_text_nodes_can_be_selected() -> None:
    """Text nodes come back as text-kind nodes."""
    doc = parse_html(SAMPLE_HTML)
    texts = find(doc, "//li/a/text()")
    assert [node.kind for node in texts] == [NodeKind.TEXT] * 3
    assert [node.data for node in texts] == ["London", "Paris", "Tokyo"]


def test_query_relative_to_subtree() -> None:
    """Relative paths start at the node passed as top."""
    doc = parse_html(SAMPLE_HTML)
    nav_element = find_one(doc, "//nav")
    assert len(find(nav_element, "ul/li")) == 3
    assert find(nav_element, "h1") == []


def test_malformed_expression_raises() -> None:
    """Compile errors surface from every facade function."""
    doc = parse_html(SAMPLE_HTML)
    with pytest.raises(ExpressionError):
        find(doc, "//li[")
    with pytest.raises(ExpressionError):
        find_one(doc, "//*[")
    with pytest.raises(ExpressionError):
        find_each(doc, "///", lambda index, node: None)


def test_non_node_set_expression_raises() -> None:
    """Expressions that evaluate to a scalar are rejected before traversal."""
    doc = parse_html(SAMPLE_HTML)
    calls = []
    with pytest.raises(ExpressionError):
        find(doc, "count(//li)")
    with pytest.raises(ExpressionError):
        find_each(doc, "1 + 1", lambda index, node: calls.append(index))
    assert calls == []
