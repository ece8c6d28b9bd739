"""Custom exceptions."""

from __future__ import annotations


class HtmlXPathError(Exception):
    """Base exception for recoverable html_xpath errors."""


class ExpressionError(HtmlXPathError):
    """Raised when an XPath expression is malformed or cannot be evaluated."""

    def __init__(
        self,
        message: str,
        expression: str | None = None,
        position: int | None = None,
    ) -> None:
        self.expression = expression
        self.position = position
        if expression is not None and position is not None:
            message = f"{message} at position {position} in {expression!r}"
        elif expression is not None:
            message = f"{message} in {expression!r}"
        super().__init__(message)


class ParseError(HtmlXPathError):
    """Raised when the HTML backend rejects a document."""


class FetchError(HtmlXPathError):
    """Raised when a document cannot be retrieved over the network."""

    def __init__(self, kind: str, url: str, detail: str | None = None) -> None:
        self.kind = kind
        self.url = url
        self.detail = detail
        message = f"{kind} for {url}: {detail}" if detail else f"{kind} for {url}"
        super().__init__(message)


class TraversalInvariantViolation(RuntimeError):
    """
    A DOM node reported a kind the navigator does not know.

    Not an HtmlXPathError: the tree builder broke its contract, and callers
    handling recoverable query errors must not swallow it.
    """

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"unknown HTML node kind: {kind!r}")
