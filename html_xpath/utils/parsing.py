"""HTML parsing helpers using Selectolax."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path
from typing import IO, TYPE_CHECKING

from selectolax.lexbor import LexborHTMLParser

from html_xpath.core.dom import Attribute, Node, NodeKind
from html_xpath.core.errors import ParseError
from html_xpath.utils.encoding import decode_html
from html_xpath.utils.logging import get_logger

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

logger = get_logger(__name__)

_DOCTYPE_RE = re.compile(r"<!doctype\s+([^\s>]+)", re.IGNORECASE)

# Selectolax names non-element nodes with a leading marker ("-text", "-comment")
_TEXT_TAG = "-text"
_NON_ELEMENT_MARKERS = ("-", "_", "!", "#")
_TEMPLATE_TAG = "template"




# ==== PUBLIC API ==== #

def parse_html(markup: str | bytes) -> Node:
    """
    Parse HTML into a document tree.

    Selectolax (lexbor backend) performs HTML5 tree construction, so the
    result always has the implied html/head/body elements and keeps
    whitespace text nodes where the HTML5 algorithm keeps them.

    Args:
        markup: HTML text, or bytes decoded with decode_html (byte order
            mark, then <meta> charset, then UTF-8)

    Returns:
        Node of kind DOCUMENT; its children are the doctype (if declared),
        document-level comments and the html element

    Raises:
        ParseError: If the backend rejects the input
    """
    if isinstance(markup, (bytes, bytearray)):
        markup = decode_html(bytes(markup))

    try:
        tree = LexborHTMLParser(markup)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise ParseError(f"cannot parse HTML: {exc}") from exc

    document = Node(NodeKind.DOCUMENT)
    top = tree.root
    if top is None:
        return document

    # Document-level nodes are the siblings of the html element
    sibling = top
    while sibling.prev is not None:
        sibling = sibling.prev

    while sibling is not None:
        node = _convert_document_child(sibling)
        if node is not None:
            document.append_child(node)
        sibling = sibling.next

    logger.debug("html_parsed", extra={"markup_len": len(markup)})
    return document




def parse_stream(reader: IO[str] | IO[bytes]) -> Node:
    """Read a text or binary file-like object to the end and parse it; bytes are decoded as in load_file."""
    return parse_html(reader.read())




def load_file(path: Path | str) -> Node:
    """
    Parse an HTML file from disk.

    The file is read as bytes and decoded with the charset the document
    declares in a <meta> tag (UTF-8 when it declares none).
    """
    return parse_html(Path(path).read_bytes())




# ==== TREE CONVERSION ==== #

def _convert_document_child(source: LexborNode) -> Node | None:
    """
    Convert a child of the document: doctype, comment or the html element.

    Doctype nodes expose no usable tag, so document children are told
    apart by their serialized form.
    """
    markup = source.html or ""
    comment = _comment_from_markup(markup)
    if comment is not None:
        return comment

    match = _DOCTYPE_RE.match(markup)
    if match is not None:
        return Node(NodeKind.DOCTYPE, match.group(1).lower())
    if markup.startswith("<"):
        return _convert_element(source)
    return None




def _convert_element(source: LexborNode) -> Node:
    """Convert an element and its subtree without recursion."""
    root = _element(source)
    stack = [(source, root)]

    while stack:
        parent_source, parent = stack.pop()
        for child_source in _source_children(parent_source):
            child = _convert_child(child_source)
            if child is not None:
                parent.append_child(child)
                if child.kind is NodeKind.ELEMENT:
                    stack.append((child_source, child))

    return root




def _source_children(source: LexborNode) -> Iterator[LexborNode]:
    """
    Iterate over the children of a lexbor node.

    Template contents live in a document fragment that `.child` does not
    reach, so they are re-parsed from the serialized template as body
    content and become ordinary children.
    """
    if source.tag == _TEMPLATE_TAG:
        inner = _inner_markup(source.html or "", _TEMPLATE_TAG)
        if not inner:
            return
        # The returned nodes keep their parser alive
        body = LexborHTMLParser(f"<body>{inner}</body>").body
        child = body.child if body is not None else None
    else:
        child = source.child

    while child is not None:
        yield child
        child = child.next




def _convert_child(source: LexborNode) -> Node | None:
    tag = source.tag
    if tag == _TEXT_TAG:
        return Node(NodeKind.TEXT, source.text() or "")
    if tag is None or tag.startswith(_NON_ELEMENT_MARKERS):
        return _comment_from_markup(source.html or "")
    return _element(source)




def _element(source: LexborNode) -> Node:
    attributes = [
        Attribute(name, value if value is not None else "")
        for name, value in source.attributes.items()
    ]
    return Node(NodeKind.ELEMENT, source.tag, attributes)




def _comment_from_markup(markup: str) -> Node | None:
    """
    Build a comment node from serialized markup, or return None.

    `<?...?>` is a bogus comment in HTML; its data keeps the question marks,
    e.g. `<?php echo 1 ?>` has the data `?php echo 1 ?`.
    """
    if markup.startswith("<!--"):
        data = markup[len("<!--"):]
        if data.endswith("-->"):
            data = data[: -len("-->")]
        return Node(NodeKind.COMMENT, data)
    if markup.startswith("<?"):
        data = markup[1:]
        if data.endswith(">"):
            data = data[:-1]
        return Node(NodeKind.COMMENT, data)
    return None




def _inner_markup(markup: str, tag: str) -> str:
    """Strip the start and end tag off an element's serialized markup."""
    quote = None
    for index, char in enumerate(markup):
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            start = index + 1
            break
    else:
        return ""

    end_tag = f"</{tag}>"
    end = len(markup) - len(end_tag) if markup.endswith(end_tag) else len(markup)
    return markup[start:end]
