"""Tests for HTML charset detection."""

import codecs

from html_xpath.utils.encoding import decode_html, sniff_meta_charset


def test_declared_encoding_wins_over_meta() -> None:
    """A charset announced outside the document beats the <meta> tag."""
    latin = '<meta charset="utf-8"><p>café</p>'.encode("latin-1")
    assert decode_html(latin, "iso-8859-1").endswith("<p>café</p>")


def test_meta_charset_is_sniffed() -> None:
    """<meta charset> and http-equiv declarations are both recognised."""
    cyrillic = '<meta charset="windows-1251"><p>привет</p>'.encode("cp1251")
    assert decode_html(cyrillic).endswith("<p>привет</p>")

    http_equiv = b'<meta http-equiv="Content-Type" content="text/html; charset=koi8-r">'
    assert sniff_meta_charset(http_equiv) == "koi8-r"


def test_meta_charset_outside_sniff_window_is_ignored() -> None:
    """Only the leading bytes are scanned."""
    content = b" " * 2048 + b'<meta charset="windows-1251">'
    assert sniff_meta_charset(content) is None


def test_byte_order_mark_wins() -> None:
    """A BOM overrides every declaration and is not part of the text."""
    content = codecs.BOM_UTF8 + '<meta charset="windows-1251"><p>ü</p>'.encode("utf-8")
    assert decode_html(content, "iso-8859-1") == '<meta charset="windows-1251"><p>ü</p>'


def test_fallback_and_unknown_charsets() -> None:
    """Unknown charsets are skipped; UTF-8 with replacement is the fallback."""
    assert decode_html("ünïcode".encode("utf-8")) == "ünïcode"
    assert decode_html(b"\xff ok", "bogus") == "\ufffd ok"
    assert decode_html(b'<meta charset="nope"><p>x</p>') == '<meta charset="nope"><p>x</p>'
