"""
Cursor exposing an HTML document through the XPath navigator contract.

The tree stores attributes as a list on their element, but XPath addresses
them as nodes. A cursor position is therefore a node plus an attribute
index: -1 means the node itself, any other value selects one attribute of
the current element. That index is only ever set while the current node
is an element.
"""

from __future__ import annotations

from html_xpath.core.dom import Node, NodeKind
from html_xpath.core.errors import TraversalInvariantViolation
from html_xpath.core.render import inner_text
from html_xpath.xpath.navigator import NodeNavigator, NodeType

_NODE_TYPES = {
    NodeKind.COMMENT: NodeType.COMMENT,
    NodeKind.TEXT: NodeType.TEXT,
    NodeKind.DOCUMENT: NodeType.ROOT,
    # Doctype declarations carry nothing queryable; they fold into the root category
    NodeKind.DOCTYPE: NodeType.ROOT,
    NodeKind.ELEMENT: NodeType.ELEMENT,
}




# ==== HTML NAVIGATOR ==== #

class HtmlNodeNavigator(NodeNavigator):
    """
    Mutable cursor over a read-only HTML tree.

    Attributes:
        root: Node the cursor was created against; move_to_root returns here
        curr: Node at the current position (the owner element while on an attribute)
        attr: Attribute index, -1 when positioned on curr itself

    Note:
        A cursor is single-owner. Use copy() to give each branch of a
        traversal, or each thread, its own cursor.
    """

    __slots__ = ("root", "curr", "attr")

    def __init__(self, top: Node) -> None:
        self.root = top
        self.curr = top
        self.attr = -1




    # --► INSPECTION

    @property
    def current(self) -> Node:
        """Node at the current position."""
        return self.curr

    @property
    def node_type(self) -> NodeType:
        """
        XPath category of the current position.

        Returns:
            ATTRIBUTE while on an attribute, otherwise the category of the
            node's kind (doctypes report ROOT)

        Raises:
            TraversalInvariantViolation: If the node has a kind the
                navigator does not know. This is fatal and is not an
                HtmlXPathError.
        """
        kind = self.curr.kind
        try:
            node_type = _NODE_TYPES[kind]
        except (KeyError, TypeError):
            raise TraversalInvariantViolation(kind) from None

        if node_type is NodeType.ELEMENT and self.attr != -1:
            return NodeType.ATTRIBUTE
        return node_type

    @property
    def local_name(self) -> str:
        """Attribute name while on an attribute, else the node's data (tag name for elements)."""
        if self.attr != -1:
            return self.curr.attributes[self.attr].name
        return self.curr.data

    @property
    def prefix(self) -> str:
        """Always empty; namespaces are not modelled."""
        return ""

    @property
    def value(self) -> str:
        """
        String value of the current position.

        Returns:
            Raw data for text and comment nodes, the attribute value while on
            an attribute, inner_text for elements, '' for anything else
        """
        kind = self.curr.kind
        if kind is NodeKind.COMMENT or kind is NodeKind.TEXT:
            return self.curr.data
        if kind is NodeKind.ELEMENT:
            if self.attr != -1:
                return self.curr.attributes[self.attr].value
            return inner_text(self.curr)
        return ""

    def copy(self) -> HtmlNodeNavigator:
        """Return an independent cursor with the same root, node and attribute index."""
        nav = HtmlNodeNavigator.__new__(HtmlNodeNavigator)
        nav.root = self.root
        nav.curr = self.curr
        nav.attr = self.attr
        return nav

    def position_key(self) -> tuple[int, int]:
        """Identity of the current node plus the attribute index."""
        return id(self.curr), self.attr




    # --► MOVES

    def move_to_root(self) -> None:
        """Return to root and leave attribute mode."""
        self.curr = self.root
        self.attr = -1

    def move_to_parent(self) -> bool:
        """
        Move to the parent node.

        From an attribute this returns to the owner element. The move is
        not bounded by root, so it can climb to the document node.

        Returns:
            False on the document node, which has no parent
        """
        if self.attr != -1:
            self.attr = -1
            return True

        parent = self.curr.parent
        if parent is None:
            return False
        self.curr = parent
        return True

    def move_to_next_attribute(self) -> bool:
        """Step to the next attribute of curr; False past the last one."""
        if self.attr >= len(self.curr.attributes) - 1:
            return False
        self.attr += 1
        return True

    def move_to_child(self) -> bool:
        """Move to the first child; fails on attributes and leaf nodes."""
        if self.attr != -1:
            return False

        child = self.curr.first_child
        if child is None:
            return False
        self.curr = child
        return True

    def move_to_first(self) -> bool:
        """
        Move to the first sibling.

        Returns:
            False when already on the first sibling or on an attribute;
            the position is then unchanged
        """
        if self.attr != -1 or self.curr.prev_sibling is None:
            return False

        node = self.curr
        while node.prev_sibling is not None:
            node = node.prev_sibling
        self.curr = node
        return True

    def move_to_next(self) -> bool:
        """Move to the next sibling."""
        if self.attr != -1:
            return False

        sibling = self.curr.next_sibling
        if sibling is None:
            return False
        self.curr = sibling
        return True

    def move_to_previous(self) -> bool:
        """Move to the previous sibling."""
        if self.attr != -1:
            return False

        sibling = self.curr.prev_sibling
        if sibling is None:
            return False
        self.curr = sibling
        return True

    def move_to(self, other: NodeNavigator) -> bool:
        """
        Jump to the position of another cursor.

        Args:
            other: Cursor to copy the position from

        Returns:
            False, leaving this cursor in place, when other is not an
            HtmlNodeNavigator created against the same root
        """
        # Cursors created against different roots are unrelated traversals
        if not isinstance(other, HtmlNodeNavigator) or other.root is not self.root:
            return False

        self.curr = other.curr
        self.attr = other.attr
        return True




    # --► COMPARISON

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HtmlNodeNavigator):
            return NotImplemented
        return (
            self.root is other.root
            and self.curr is other.curr
            and self.attr == other.attr
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.attr != -1:
            return f"<HtmlNodeNavigator {self.curr!r} @{self.local_name}>"
        return f"<HtmlNodeNavigator {self.curr!r}>"
