"""
Document tree model shared by the parser, the navigator and the renderers.

This module defines:
- NodeKind, the five node kinds a parsed HTML document contains
- Attribute, an immutable name/value pair
- Node, a tree node with parent, child and sibling links

A tree is built once by html_xpath.utils.parsing and is read-only afterwards;
any number of navigators may walk it concurrently.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator

import msgspec




# ==== NODE KINDS ==== #

class NodeKind(enum.Enum):
    """Kind of a document node."""

    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"




# ==== ATTRIBUTES ==== #

class Attribute(msgspec.Struct, frozen=True):
    """
    Element attribute.

    Attributes:
        name: Attribute name as written by the parser (lower case for HTML)
        value: Attribute value, empty string for bare attributes
    """

    name: str
    value: str = ""




# ==== NODES ==== #

class Node:
    """
    A node of a parsed HTML document.

    Attributes:
        kind: One of NodeKind
        data: Tag name for elements, text for text and comment nodes,
            the declared name for doctype nodes, empty for documents
        attributes: Attributes in document order
        parent: Parent node, None for the document
        first_child, last_child: Ends of the child list
        prev_sibling, next_sibling: Neighbours in the parent's child list

    Note:
        Nodes compare by identity. Links are plain back-references; the
        garbage collector reclaims a tree once nothing holds any of its nodes.
    """

    __slots__ = (
        "kind",
        "data",
        "attributes",
        "parent",
        "first_child",
        "last_child",
        "prev_sibling",
        "next_sibling",
    )

    def __init__(
        self,
        kind: NodeKind,
        data: str = "",
        attributes: Iterable[Attribute] = (),
    ) -> None:
        self.kind = kind
        self.data = data
        self.attributes: tuple[Attribute, ...] = tuple(attributes)
        self.parent: Node | None = None
        self.first_child: Node | None = None
        self.last_child: Node | None = None
        self.prev_sibling: Node | None = None
        self.next_sibling: Node | None = None




    # --► TREE CONSTRUCTION

    def append_child(self, child: Node) -> Node:
        """
        Append child as the last child of this node and return it.

        Raises:
            ValueError: If child is already attached to a tree

        Note:
            Only tree builders call this; a finished document is never
            modified again.
        """
        if child.parent is not None or child.prev_sibling is not None or child.next_sibling is not None:
            raise ValueError("append_child called for an attached child node")

        last = self.last_child
        if last is None:
            self.first_child = child
        else:
            last.next_sibling = child
        child.prev_sibling = last
        child.parent = self
        self.last_child = child
        return child




    # --► TRAVERSAL

    def children(self) -> Iterator[Node]:
        """Iterate over direct children in document order."""
        child = self.first_child
        while child is not None:
            yield child
            child = child.next_sibling

    def __repr__(self) -> str:
        if self.kind is NodeKind.ELEMENT:
            return f"<Node element {self.data!r}>"
        if self.kind in (NodeKind.TEXT, NodeKind.COMMENT):
            return f"<Node {self.kind.value} {self.data[:30]!r}>"
        return f"<Node {getattr(self.kind, 'value', self.kind)}>"
