"""
Text and markup projections of document nodes.

This module provides:
- inner_text: recursive text content, comments excluded
- select_attr: attribute lookup by name
- output_html: HTML serialization of a node or of its children
"""

from __future__ import annotations

import html
from io import StringIO

from html_xpath.core.dom import Node, NodeKind

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

RAW_TEXT_ELEMENTS = frozenset(
    {
        "iframe",
        "noembed",
        "noframes",
        "noscript",
        "plaintext",
        "script",
        "style",
        "xmp",
    }
)

# A leading newline right after these start tags is dropped by parsers,
# so one is re-emitted to keep the content intact.
NEWLINE_SENSITIVE_ELEMENTS = frozenset({"pre", "listing", "textarea"})




# ==== TEXT PROJECTION ==== #

def inner_text(node: Node) -> str:
    """
    Return the text between the start and end tags of node.

    Text nodes are concatenated in document order. Comment nodes and
    everything below them contribute nothing; element markup is dropped.

    Args:
        node: Any document node

    Returns:
        Concatenated text content (empty string if there is none)
    """
    parts: list[str] = []
    stack = [node]

    while stack:
        current = stack.pop()
        if current.kind is NodeKind.TEXT:
            parts.append(current.data)
            continue
        if current.kind is NodeKind.COMMENT:
            continue
        # Push children reversed so they pop in document order
        child = current.last_child
        while child is not None:
            stack.append(child)
            child = child.prev_sibling

    return "".join(parts)




def select_attr(node: Node | None, name: str) -> str:
    """
    Return the value of the first attribute called name.

    Args:
        node: Node to inspect (None is accepted)
        name: Attribute name

    Returns:
        Attribute value, or empty string if node is None or has no such attribute
    """
    if node is None:
        return ""

    for attr in node.attributes:
        if attr.name == name:
            return attr.value
    return ""




# ==== MARKUP PROJECTION ==== #

def output_html(node: Node, include_self: bool = True) -> str:
    """
    Serialize node back to HTML.

    Args:
        node: Node to render
        include_self: Render node's own tag (outer HTML); when False only
            its children are rendered (inner HTML)

    Returns:
        HTML markup; comments are reproduced verbatim
    """
    buf = StringIO()
    if include_self:
        _render(buf, node)
    else:
        for child in node.children():
            _render(buf, child)
    return buf.getvalue()




def _render(buf: StringIO, node: Node) -> None:
    kind = node.kind

    if kind is NodeKind.TEXT:
        buf.write(html.escape(node.data, quote=False))
    elif kind is NodeKind.COMMENT:
        buf.write(f"<!--{node.data}-->")
    elif kind is NodeKind.DOCTYPE:
        buf.write(f"<!DOCTYPE {node.data}>")
    elif kind is NodeKind.DOCUMENT:
        for child in node.children():
            _render(buf, child)
    elif kind is NodeKind.ELEMENT:
        _render_element(buf, node)
    else:
        raise ValueError(f"cannot render node kind {kind!r}")




def _render_element(buf: StringIO, node: Node) -> None:
    tag = node.data
    buf.write("<")
    buf.write(tag)
    for attr in node.attributes:
        buf.write(f' {attr.name}="{html.escape(attr.value, quote=True)}"')
    buf.write(">")

    if tag in VOID_ELEMENTS:
        return

    first = node.first_child
    if (
        tag in NEWLINE_SENSITIVE_ELEMENTS
        and first is not None
        and first.kind is NodeKind.TEXT
        and first.data.startswith("\n")
    ):
        buf.write("\n")

    if tag in RAW_TEXT_ELEMENTS:
        for child in node.children():
            if child.kind is NodeKind.TEXT:
                buf.write(child.data)
            else:
                _render(buf, child)
    else:
        for child in node.children():
            _render(buf, child)

    buf.write(f"</{tag}>")
