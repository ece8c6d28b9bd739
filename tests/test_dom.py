"""Tests for the document tree model."""

import pytest

from html_xpath.core.dom import Attribute, Node, NodeKind


def test_append_child_links_siblings() -> None:
    """Appending keeps first/last child and sibling links in step."""
    parent = Node(NodeKind.ELEMENT, "ul")
    first = parent.append_child(Node(NodeKind.ELEMENT, "li"))
    second = parent.append_child(Node(NodeKind.ELEMENT, "li"))

    assert parent.first_child is first
    assert parent.last_child is second
    assert first.next_sibling is second
    assert second.prev_sibling is first
    assert first.prev_sibling is None
    assert second.next_sibling is None
    assert list(parent.children()) == [first, second]


def test_append_attached_child_rejected() -> None:
    """A node cannot be attached twice."""
    parent = Node(NodeKind.ELEMENT, "div")
    child = parent.append_child(Node(NodeKind.TEXT, "x"))
    with pytest.raises(ValueError):
        Node(NodeKind.ELEMENT, "p").append_child(child)


def test_attributes_are_immutable() -> None:
    """Attribute pairs are frozen and stored as a tuple."""
    node = Node(NodeKind.ELEMENT, "a", [Attribute("href", "/x")])
    assert node.attributes == (Attribute("href", "/x"),)
    with pytest.raises(AttributeError):
        node.attributes[0].value = "/y"  # type: ignore[misc]


def test_repr_mentions_kind() -> None:
    """repr is short and names the node."""
    assert repr(Node(NodeKind.ELEMENT, "div")) == "<Node element 'div'>"
    assert repr(Node(NodeKind.DOCUMENT)) == "<Node document>"
