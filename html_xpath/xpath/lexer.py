"""
Tokenizer for XPath 1.0 expressions.

Besides splitting the source, the tokenizer applies the XPath lexical
disambiguation rule: when a token follows something that can end an
operand, `*` is the multiplication operator and `and`, `or`, `mod`, `div`
are operator names; everywhere else they are name tests.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from html_xpath.core.errors import ExpressionError

NUMBER = "number"
LITERAL = "literal"
NAME = "name"
OPERATOR = "operator"
SYMBOL = "symbol"

OPERATOR_NAMES = frozenset({"and", "or", "mod", "div"})

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<number>\d+(?:\.\d*)?|\.\d+)
    | (?P<literal>"[^"]*"|'[^']*')
    | (?P<symbol>//|::|\.\.|!=|<=|>=|[/()\[\]@,|+\-=<>*.$])
    | (?P<name>[^\W\d][\w.\-]*(?::(?:[^\W\d][\w.\-]*|\*))?)
    """,
    re.VERBOSE,
)

_OPERATOR_SYMBOLS = frozenset(
    {"/", "//", "|", "+", "-", "=", "!=", "<", "<=", ">", ">="}
)

# Tokens after which `*` and operator names start an operand instead
_OPERAND_STARTERS = frozenset({"@", "::", "(", "[", ","})


class Token(NamedTuple):
    """A lexical token with its offset in the source."""

    kind: str
    value: str
    position: int




# ==== TOKENIZER ==== #

def tokenize(source: str) -> list[Token]:
    """
    Split an XPath expression into tokens.

    Args:
        source: Expression text

    Returns:
        Tokens in source order (whitespace dropped)

    Raises:
        ExpressionError: On characters that cannot start any token, such as
            an unterminated string literal
    """
    tokens: list[Token] = []
    pos = 0
    end = len(source)

    while pos < end:
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise ExpressionError(
                f"unexpected character {source[pos]!r}", source, pos
            )

        kind = match.lastgroup
        text = match.group()
        start = pos
        pos = match.end()

        if kind == "space":
            continue
        if kind == "symbol":
            if text == "*":
                kind = OPERATOR if _follows_operand(tokens) else NAME
            elif text in _OPERATOR_SYMBOLS:
                kind = OPERATOR
            else:
                kind = SYMBOL
        elif kind == "name" and text in OPERATOR_NAMES and _follows_operand(tokens):
            kind = OPERATOR

        tokens.append(Token(kind, text, start))

    return tokens




def _follows_operand(tokens: list[Token]) -> bool:
    if not tokens:
        return False
    previous = tokens[-1]
    if previous.kind == OPERATOR:
        return False
    return previous.value not in _OPERAND_STARTERS
