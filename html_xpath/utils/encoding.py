"""
Charset detection for HTML byte strings.

This module provides:
- Byte order mark detection
- <meta charset> / http-equiv sniffing in the leading bytes
- Decoding with a declared charset and a UTF-8 fallback
"""

from __future__ import annotations

import codecs
import re

from html_xpath.config.constants import CHARSET_SNIFF_BYTES, DEFAULT_FALLBACK_ENCODING

_META_CHARSET_RE = re.compile(
    rb"<meta[^>]+charset\s*=\s*[\"']?\s*([A-Za-z0-9_.:\-]+)",
    re.IGNORECASE,
)

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)




# ==== CHARSET DETECTION ==== #

def sniff_meta_charset(content: bytes) -> str | None:
    """Return the charset named by a <meta> tag near the start of content."""
    match = _META_CHARSET_RE.search(content[:CHARSET_SNIFF_BYTES])
    if match is None:
        return None
    return match.group(1).decode("ascii", errors="ignore")




def decode_html(content: bytes, declared_encoding: str | None = None) -> str:
    """
    Decode an HTML document to text.

    A byte order mark wins, then declared_encoding (e.g. from a
    Content-Type header), then a <meta> declaration in the first
    CHARSET_SNIFF_BYTES bytes. Unknown charsets are skipped; the fallback
    is UTF-8. Undecodable bytes are replaced, never raised.

    Args:
        content: Raw document bytes
        declared_encoding: Charset announced outside the document, if any

    Returns:
        Decoded markup

    Example:
        decode_html('<meta charset="cp1251"><p>Привет</p>'.encode("cp1251"))
        -> '<meta charset="cp1251"><p>Привет</p>'
    """
    for bom, encoding in _BOMS:
        if content.startswith(bom):
            return content.decode(encoding, errors="replace")

    for candidate in (declared_encoding, sniff_meta_charset(content)):
        if not candidate:
            continue
        try:
            codec = codecs.lookup(candidate)
        except LookupError:
            continue
        return content.decode(codec.name, errors="replace")

    return content.decode(DEFAULT_FALLBACK_ENCODING, errors="replace")
