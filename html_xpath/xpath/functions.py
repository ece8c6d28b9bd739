"""
XPath 1.0 value coercions and core function library.

Values flowing through the engine are one of:
- list of navigators (a node-set, in document order)
- str
- float (every number, including integers)
- bool
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NamedTuple

from html_xpath.core.errors import ExpressionError
from html_xpath.xpath.navigator import NodeNavigator, NodeType

if TYPE_CHECKING:
    from html_xpath.xpath.expr import Context

_NUMBER_RE = re.compile(r"^\s*-?(?:\d+(?:\.\d*)?|\.\d+)\s*$")




# ==== TYPE COERCION ==== #

def to_string(value: Any) -> str:
    """Convert a value to a string following the XPath string() rules."""
    if isinstance(value, list):
        return value[0].value if value else ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return number_to_string(value)
    return value


def to_number(value: Any) -> float:
    """Convert a value to a number following the XPath number() rules."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    text = to_string(value)
    if _NUMBER_RE.match(text) is None:
        return math.nan
    return float(text)


def to_boolean(value: Any) -> bool:
    """Convert a value to a boolean following the XPath boolean() rules."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return not (value == 0 or math.isnan(value))
    return len(value) > 0


def number_to_string(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == int(number):
        return str(int(number))
    text = repr(number)
    if "e" in text:
        text = f"{number:.20f}".rstrip("0")
    return text


def _node_set(value: Any, function: str) -> list[NodeNavigator]:
    if not isinstance(value, list):
        raise ExpressionError(f"{function}() requires a node-set argument")
    return value




# ==== FUNCTION REGISTRY ==== #

class Function(NamedTuple):
    """A library function and the number of arguments it accepts."""

    name: str
    impl: Callable[..., Any]
    min_args: int
    max_args: int | None  # None = variadic


FUNCTIONS: dict[str, Function] = {}


def function(name: str, min_args: int = 0, max_args: int | None = -1):
    """Register a library function; max_args defaults to min_args."""

    def register(impl: Callable[..., Any]) -> Callable[..., Any]:
        upper = min_args if max_args == -1 else max_args
        FUNCTIONS[name] = Function(name, impl, min_args, upper)
        return impl

    return register




# ==== NODE-SET FUNCTIONS ==== #

@function("last")
def _last(context: Context) -> float:
    return float(context.size)


@function("position")
def _position(context: Context) -> float:
    return float(context.position)


@function("count", 1)
def _count(context: Context, nodes: Any) -> float:
    return float(len(_node_set(nodes, "count")))


def _name_of(context: Context, args: tuple[Any, ...], function_name: str) -> str:
    if args:
        nodes = _node_set(args[0], function_name)
        if not nodes:
            return ""
        node = nodes[0]
    else:
        node = context.node

    # Text, comment and root nodes have no expanded name
    if node.node_type in (NodeType.ELEMENT, NodeType.ATTRIBUTE):
        return node.local_name
    return ""


@function("local-name", 0, 1)
def _local_name(context: Context, *args: Any) -> str:
    return _name_of(context, args, "local-name")


@function("name", 0, 1)
def _name(context: Context, *args: Any) -> str:
    return _name_of(context, args, "name")


@function("namespace-uri", 0, 1)
def _namespace_uri(context: Context, *args: Any) -> str:
    if args:
        _node_set(args[0], "namespace-uri")
    return ""




# ==== STRING FUNCTIONS ==== #

def _string_arg(context: Context, args: tuple[Any, ...]) -> str:
    if args:
        return to_string(args[0])
    return context.node.value


@function("string", 0, 1)
def _string(context: Context, *args: Any) -> str:
    return _string_arg(context, args)


@function("concat", 2, None)
def _concat(context: Context, *args: Any) -> str:
    return "".join(to_string(arg) for arg in args)


@function("starts-with", 2)
def _starts_with(context: Context, text: Any, prefix: Any) -> bool:
    return to_string(text).startswith(to_string(prefix))


@function("ends-with", 2)
def _ends_with(context: Context, text: Any, suffix: Any) -> bool:
    return to_string(text).endswith(to_string(suffix))


@function("contains", 2)
def _contains(context: Context, text: Any, part: Any) -> bool:
    return to_string(part) in to_string(text)


@function("substring-before", 2)
def _substring_before(context: Context, text: Any, separator: Any) -> str:
    text, separator = to_string(text), to_string(separator)
    head, found, _ = text.partition(separator)
    return head if found else ""


@function("substring-after", 2)
def _substring_after(context: Context, text: Any, separator: Any) -> str:
    text, separator = to_string(text), to_string(separator)
    _, found, tail = text.partition(separator)
    return tail if found else ""


@function("substring", 2, 3)
def _substring(context: Context, text: Any, start: Any, *length: Any) -> str:
    """Characters at 1-based positions p with round(start) <= p < round(start) + round(length)."""
    text = to_string(text)
    first = _xpath_round(to_number(start))
    last = first + _xpath_round(to_number(length[0])) if length else math.inf

    chars = []
    for position, char in enumerate(text, 1):
        if first <= position < last:
            chars.append(char)
    return "".join(chars)


@function("string-length", 0, 1)
def _string_length(context: Context, *args: Any) -> float:
    return float(len(_string_arg(context, args)))


@function("normalize-space", 0, 1)
def _normalize_space(context: Context, *args: Any) -> str:
    return " ".join(_string_arg(context, args).split())


@function("translate", 3)
def _translate(context: Context, text: Any, source: Any, target: Any) -> str:
    source, target = to_string(source), to_string(target)
    table: dict[int, int | None] = {}
    for index, char in enumerate(source):
        # First occurrence wins
        if ord(char) in table:
            continue
        table[ord(char)] = ord(target[index]) if index < len(target) else None
    return to_string(text).translate(table)


@function("lower-case", 1)
def _lower_case(context: Context, text: Any) -> str:
    return to_string(text).lower()


@function("upper-case", 1)
def _upper_case(context: Context, text: Any) -> str:
    return to_string(text).upper()




# ==== BOOLEAN FUNCTIONS ==== #

@function("boolean", 1)
def _boolean(context: Context, value: Any) -> bool:
    return to_boolean(value)


@function("not", 1)
def _not(context: Context, value: Any) -> bool:
    return not to_boolean(value)


@function("true")
def _true(context: Context) -> bool:
    return True


@function("false")
def _false(context: Context) -> bool:
    return False




# ==== NUMBER FUNCTIONS ==== #

@function("number", 0, 1)
def _number(context: Context, *args: Any) -> float:
    if args:
        return to_number(args[0])
    return to_number(context.node.value)


@function("sum", 1)
def _sum(context: Context, nodes: Any) -> float:
    return math.fsum(to_number(node.value) for node in _node_set(nodes, "sum"))


@function("floor", 1)
def _floor(context: Context, value: Any) -> float:
    number = to_number(value)
    if not math.isfinite(number):
        return number
    return float(math.floor(number))


@function("ceiling", 1)
def _ceiling(context: Context, value: Any) -> float:
    number = to_number(value)
    if not math.isfinite(number):
        return number
    return float(math.ceil(number))


@function("round", 1)
def _round(context: Context, value: Any) -> float:
    return _xpath_round(to_number(value))


def _xpath_round(number: float) -> float:
    # Halves round towards positive infinity, unlike Python's round()
    if not math.isfinite(number):
        return number
    return float(math.floor(number + 0.5))
