"""
XPath axes implemented on top of the navigator moves.

Every axis function takes a context cursor, never moves it, and yields
fresh cursor copies in axis order: document order for forward axes,
reverse document order for reverse axes.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator

from html_xpath.xpath.navigator import NodeNavigator, NodeType

Axis = Callable[[NodeNavigator], Iterator[NodeNavigator]]

ANCESTOR = "ancestor"
ANCESTOR_OR_SELF = "ancestor-or-self"
ATTRIBUTE = "attribute"
CHILD = "child"
DESCENDANT = "descendant"
DESCENDANT_OR_SELF = "descendant-or-self"
FOLLOWING = "following"
FOLLOWING_SIBLING = "following-sibling"
PARENT = "parent"
PRECEDING = "preceding"
PRECEDING_SIBLING = "preceding-sibling"
SELF = "self"

REVERSE_AXES = frozenset({ANCESTOR, ANCESTOR_OR_SELF, PRECEDING, PRECEDING_SIBLING})




# ==== AXIS GENERATORS ==== #

def self_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    yield nav.copy()


def child_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    if not cursor.move_to_child():
        return
    yield cursor.copy()
    while cursor.move_to_next():
        yield cursor.copy()


def attribute_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    if nav.node_type is not NodeType.ELEMENT:
        return
    cursor = nav.copy()
    while cursor.move_to_next_attribute():
        yield cursor.copy()


def parent_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    if cursor.move_to_parent():
        yield cursor


def ancestor_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    while cursor.move_to_parent():
        yield cursor.copy()


def ancestor_or_self_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    yield nav.copy()
    yield from ancestor_axis(nav)


def descendant_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    """Depth-first walk below nav, without recursion."""
    cursor = nav.copy()
    if not cursor.move_to_child():
        return

    depth = 0
    while True:
        yield cursor.copy()
        if cursor.move_to_child():
            depth += 1
            continue
        while not cursor.move_to_next():
            if depth == 0:
                return
            cursor.move_to_parent()
            depth -= 1


def descendant_or_self_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    yield nav.copy()
    yield from descendant_axis(nav)


def following_sibling_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    while cursor.move_to_next():
        yield cursor.copy()


def preceding_sibling_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    while cursor.move_to_previous():
        yield cursor.copy()


def following_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    if cursor.node_type is NodeType.ATTRIBUTE:
        # Everything inside the owner element comes after its attributes
        cursor.move_to_parent()
        yield from descendant_axis(cursor)

    while True:
        if cursor.move_to_next():
            yield from descendant_or_self_axis(cursor)
        elif not cursor.move_to_parent():
            return


def preceding_axis(nav: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = nav.copy()
    if cursor.node_type is NodeType.ATTRIBUTE:
        cursor.move_to_parent()

    # Ancestors are skipped: they are reached via move_to_parent only
    while True:
        if cursor.move_to_previous():
            yield from reversed(list(descendant_or_self_axis(cursor)))
        elif not cursor.move_to_parent():
            return


AXES: dict[str, Axis] = {
    ANCESTOR: ancestor_axis,
    ANCESTOR_OR_SELF: ancestor_or_self_axis,
    ATTRIBUTE: attribute_axis,
    CHILD: child_axis,
    DESCENDANT: descendant_axis,
    DESCENDANT_OR_SELF: descendant_or_self_axis,
    FOLLOWING: following_axis,
    FOLLOWING_SIBLING: following_sibling_axis,
    PARENT: parent_axis,
    PRECEDING: preceding_axis,
    PRECEDING_SIBLING: preceding_sibling_axis,
    SELF: self_axis,
}




# ==== DOCUMENT ORDER ==== #

class DocumentOrder:
    """
    Preorder index of every position in one tree, attributes included.

    The index is built on first use by a single walk from the topmost
    ancestor, so sorting a node-set costs a dictionary lookup per node.
    One instance serves a whole evaluation; the tree must not change
    while it is alive.
    """

    def __init__(self) -> None:
        self._index: dict[Hashable, int] | None = None

    def key(self, nav: NodeNavigator) -> int:
        """Return the preorder position of nav; equal keys mean the same position."""
        if self._index is None:
            self._index = _preorder_index(nav)
        return self._index[nav.position_key()]

    def sort(self, nodes: Iterable[NodeNavigator]) -> list[NodeNavigator]:
        """Sort positions into document order and drop duplicates."""
        unique: dict[int, NodeNavigator] = {}
        for node in nodes:
            unique.setdefault(self.key(node), node)
        return [unique[key] for key in sorted(unique)]


def _preorder_index(nav: NodeNavigator) -> dict[Hashable, int]:
    top = nav.copy()
    while top.move_to_parent():
        pass

    index: dict[Hashable, int] = {}
    for node in descendant_or_self_axis(top):
        index[node.position_key()] = len(index)
        # An element's attributes sort after it and before its first child
        for attr in attribute_axis(node):
            index[attr.position_key()] = len(index)
    return index
