"""
Navigator contract consumed by the XPath engine.

The engine knows nothing about the tree it walks. Any cursor type that
implements NodeNavigator can be queried: the engine moves copies of it
around and reads node categories, names and string values.
"""

from __future__ import annotations

import abc
import enum
from collections.abc import Hashable




# ==== NODE CATEGORIES ==== #

class NodeType(enum.Enum):
    """XPath node categories."""

    ROOT = "root"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    TEXT = "text"
    COMMENT = "comment"
    ANY = "any"  # only used by node tests; never reported by a navigator




# ==== NAVIGATOR CONTRACT ==== #

class NodeNavigator(abc.ABC):
    """
    Cursor over a tree.

    Move methods return False and leave the cursor untouched when the
    requested move is impossible; that is ordinary control flow for the
    engine, not an error.
    """

    @property
    @abc.abstractmethod
    def node_type(self) -> NodeType:
        """Category of the node at the current position."""

    @property
    @abc.abstractmethod
    def local_name(self) -> str:
        """Name of the current node without prefix."""

    @property
    @abc.abstractmethod
    def prefix(self) -> str:
        """Namespace prefix of the current node."""

    @property
    @abc.abstractmethod
    def value(self) -> str:
        """String value of the current node."""

    @abc.abstractmethod
    def copy(self) -> NodeNavigator:
        """Return an independent cursor at the same position."""

    @abc.abstractmethod
    def position_key(self) -> Hashable:
        """
        Return a hashable identity of the current position.

        Two cursors over the same tree return equal keys exactly when they
        denote the same node, or the same attribute of the same element.
        """

    @abc.abstractmethod
    def move_to_root(self) -> None:
        """Move to the root the cursor was created against."""

    @abc.abstractmethod
    def move_to_parent(self) -> bool:
        """Move to the parent node (the owner element for attributes)."""

    @abc.abstractmethod
    def move_to_next_attribute(self) -> bool:
        """Move to the next attribute of the current element."""

    @abc.abstractmethod
    def move_to_child(self) -> bool:
        """Move to the first child node."""

    @abc.abstractmethod
    def move_to_first(self) -> bool:
        """Move to the first sibling node."""

    @abc.abstractmethod
    def move_to_next(self) -> bool:
        """Move to the next sibling node."""

    @abc.abstractmethod
    def move_to_previous(self) -> bool:
        """Move to the previous sibling node."""

    @abc.abstractmethod
    def move_to(self, other: NodeNavigator) -> bool:
        """Move to the position of another cursor over the same tree."""

    def __str__(self) -> str:
        return self.value
