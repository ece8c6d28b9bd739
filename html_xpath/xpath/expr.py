"""
Expression tree and evaluation for compiled XPath expressions.

Every node of the tree implements evaluate(context). Node-set producing
nodes (location paths, filters, unions) also implement iterate(context),
which yields cursor positions lazily and in document order.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable, Iterable, Iterator
from itertools import chain
from typing import Any

from html_xpath.core.errors import ExpressionError
from html_xpath.xpath import axes
from html_xpath.xpath.functions import Function, to_boolean, to_number, to_string
from html_xpath.xpath.navigator import NodeNavigator, NodeType




# ==== EVALUATION CONTEXT ==== #

class Context:
    """
    Context node plus its proximity position and the context size.

    All contexts of one evaluation share a single DocumentOrder.
    """

    __slots__ = ("node", "position", "size", "order")

    def __init__(
        self,
        node: NodeNavigator,
        position: int = 1,
        size: int = 1,
        order: axes.DocumentOrder | None = None,
    ) -> None:
        self.node = node
        self.position = position
        self.size = size
        self.order = order if order is not None else axes.DocumentOrder()




# ==== BASE CLASSES ==== #

class Expr:
    """Base class of all expression nodes."""

    returns_nodes = False

    def evaluate(self, context: Context) -> Any:
        raise NotImplementedError

    def iterate(self, context: Context) -> Iterator[NodeNavigator]:
        raise ExpressionError(f"{self} does not select nodes")


class NodeSetExpr(Expr):
    """Expression whose value is a node-set."""

    returns_nodes = True

    def evaluate(self, context: Context) -> list[NodeNavigator]:
        return list(self.iterate(context))




# ==== LITERALS ==== #

class Literal(Expr):
    def __init__(self, value: str) -> None:
        self.value = value

    def evaluate(self, context: Context) -> str:
        return self.value

    def __str__(self) -> str:
        quote = "'" if '"' in self.value else '"'
        return f"{quote}{self.value}{quote}"


class Number(Expr):
    def __init__(self, value: float) -> None:
        self.value = value

    def evaluate(self, context: Context) -> float:
        return self.value

    def __str__(self) -> str:
        return to_string(self.value)




# ==== NODE TESTS ==== #

class NameTest:
    """Matches nodes of the axis' principal type by name (`*` matches all)."""

    def __init__(self, name: str, prefix: str = "") -> None:
        self.name = name
        self.prefix = prefix

    def matches(self, node: NodeNavigator, principal: NodeType) -> bool:
        if node.node_type is not principal:
            return False
        if self.prefix and node.prefix != self.prefix:
            return False
        return self.name == "*" or node.local_name == self.name

    def __str__(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name


class TypeTest:
    """Matches nodes by category: node(), text(), comment(), processing-instruction()."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.node_type = {
            "node": NodeType.ANY,
            "text": NodeType.TEXT,
            "comment": NodeType.COMMENT,
        }.get(name)

    def matches(self, node: NodeNavigator, principal: NodeType) -> bool:
        if self.node_type is None:
            # HTML documents have no processing instructions
            return False
        return self.node_type is NodeType.ANY or node.node_type is self.node_type

    def __str__(self) -> str:
        return f"{self.name}()"




# ==== LOCATION PATHS ==== #

class Step:
    """One location step: axis, node test and predicates."""

    def __init__(self, axis: str, test: NameTest | TypeTest, predicates: list[Expr] | None = None) -> None:
        self.axis = axis
        self.test = test
        self.predicates = predicates or []
        self._walk = axes.AXES[axis]
        self._principal = NodeType.ATTRIBUTE if axis == axes.ATTRIBUTE else NodeType.ELEMENT
        self._reverse = axis in axes.REVERSE_AXES

    def apply(
        self,
        contexts: Iterable[NodeNavigator],
        order: axes.DocumentOrder,
    ) -> Iterator[NodeNavigator]:
        """
        Apply the step to every context node.

        A single context on a forward axis streams its results; anything
        else is collected and put into document order.
        """
        contexts = iter(contexts)
        first = next(contexts, None)
        if first is None:
            return
        second = next(contexts, None)

        if second is None:
            if self._reverse:
                yield from reversed(list(self._select(first, order)))
            else:
                yield from self._select(first, order)
            return

        yield from order.sort(
            chain.from_iterable(
                self._select(context, order) for context in chain((first, second), contexts)
            )
        )

    def _select(self, context: NodeNavigator, order: axes.DocumentOrder) -> Iterable[NodeNavigator]:
        candidates: Iterable[NodeNavigator] = (
            node for node in self._walk(context) if self.test.matches(node, self._principal)
        )
        # Proximity positions follow axis order, so reverse axes count backwards
        for predicate in self.predicates:
            candidates = filter_by_predicate(list(candidates), predicate, order)
        return candidates

    def __str__(self) -> str:
        predicates = "".join(f"[{predicate}]" for predicate in self.predicates)
        return f"{self.axis}::{self.test}{predicates}"


def filter_by_predicate(
    nodes: list[NodeNavigator],
    predicate: Expr,
    order: axes.DocumentOrder,
) -> list[NodeNavigator]:
    """Keep nodes for which predicate holds; a number means position() = number."""
    size = len(nodes)
    kept = []
    for position, node in enumerate(nodes, 1):
        result = predicate.evaluate(Context(node, position, size, order))
        if isinstance(result, float):
            keep = result == position
        else:
            keep = to_boolean(result)
        if keep:
            kept.append(node)
    return kept


class LocationPath(NodeSetExpr):
    """
    Sequence of steps, starting at the root, at the context node, or at
    the result of a filter expression.
    """

    def __init__(self, steps: list[Step], absolute: bool = False, start: Expr | None = None) -> None:
        self.steps = steps
        self.absolute = absolute
        self.start = start

    def iterate(self, context: Context) -> Iterator[NodeNavigator]:
        if self.start is not None:
            nodes: Iterable[NodeNavigator] = self.start.iterate(context)
        elif self.absolute:
            root = context.node.copy()
            root.move_to_root()
            nodes = (root,)
        else:
            nodes = (context.node.copy(),)

        for step in self.steps:
            nodes = step.apply(nodes, context.order)
        return iter(nodes)

    def __str__(self) -> str:
        body = "/".join(str(step) for step in self.steps)
        if self.start is not None:
            return f"{self.start}/{body}"
        return f"/{body}" if self.absolute else body


class FilterExpr(NodeSetExpr):
    """Primary expression followed by predicates, e.g. (//a)[1]."""

    def __init__(self, primary: Expr, predicates: list[Expr]) -> None:
        self.primary = primary
        self.predicates = predicates

    def iterate(self, context: Context) -> Iterator[NodeNavigator]:
        nodes = context.order.sort(self.primary.iterate(context))
        for predicate in self.predicates:
            nodes = filter_by_predicate(nodes, predicate, context.order)
        return iter(nodes)

    def __str__(self) -> str:
        predicates = "".join(f"[{predicate}]" for predicate in self.predicates)
        return f"({self.primary}){predicates}"


class UnionExpr(NodeSetExpr):
    def __init__(self, left: Expr, right: Expr) -> None:
        self.left = left
        self.right = right

    def iterate(self, context: Context) -> Iterator[NodeNavigator]:
        return iter(
            context.order.sort(chain(self.left.iterate(context), self.right.iterate(context)))
        )

    def __str__(self) -> str:
        return f"{self.left} | {self.right}"




# ==== OPERATORS ==== #

class OrExpr(Expr):
    def __init__(self, left: Expr, right: Expr) -> None:
        self.left = left
        self.right = right

    def evaluate(self, context: Context) -> bool:
        return to_boolean(self.left.evaluate(context)) or to_boolean(self.right.evaluate(context))

    def __str__(self) -> str:
        return f"{self.left} or {self.right}"


class AndExpr(Expr):
    def __init__(self, left: Expr, right: Expr) -> None:
        self.left = left
        self.right = right

    def evaluate(self, context: Context) -> bool:
        return to_boolean(self.left.evaluate(context)) and to_boolean(self.right.evaluate(context))

    def __str__(self) -> str:
        return f"{self.left} and {self.right}"


_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

# Same comparison with the operands swapped
_MIRRORED = {"=": "=", "!=": "!=", "<": ">", "<=": ">=", ">": "<", ">=": "<="}


class Comparison(Expr):
    """Equality and relational operators with the XPath 1.0 comparison rules."""

    def __init__(self, op: str, left: Expr, right: Expr) -> None:
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, context: Context) -> bool:
        return compare(self.op, self.left.evaluate(context), self.right.evaluate(context))

    def __str__(self) -> str:
        return f"{self.left} {self.op} {self.right}"


def compare(op: str, left: Any, right: Any) -> bool:
    if not isinstance(left, list) and isinstance(right, list):
        return compare(_MIRRORED[op], right, left)

    test = _COMPARISONS[op]
    equality = op in ("=", "!=")

    if isinstance(left, list):
        if isinstance(right, list):
            right_values = [node.value for node in right]
            if equality:
                return any(test(node.value, other) for node in left for other in right_values)
            right_numbers = [to_number(value) for value in right_values]
            return any(
                test(to_number(node.value), other) for node in left for other in right_numbers
            )
        if isinstance(right, bool):
            return test(to_boolean(left), right)
        if isinstance(right, float):
            return any(test(to_number(node.value), right) for node in left)
        if equality:
            return any(test(node.value, right) for node in left)
        number = to_number(right)
        return any(test(to_number(node.value), number) for node in left)

    if equality:
        if isinstance(left, bool) or isinstance(right, bool):
            return test(to_boolean(left), to_boolean(right))
        if isinstance(left, float) or isinstance(right, float):
            return test(to_number(left), to_number(right))
        return test(to_string(left), to_string(right))
    return test(to_number(left), to_number(right))


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        # Sign of a zero divisor matters: 1 div -0 is -Infinity
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    # Result takes the sign of the dividend, as with truncating division
    return math.fmod(left, right)


_ARITHMETIC: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "div": _divide,
    "mod": _modulo,
}


class Arithmetic(Expr):
    def __init__(self, op: str, left: Expr, right: Expr) -> None:
        self.op = op
        self.left = left
        self.right = right
        self._apply = _ARITHMETIC[op]

    def evaluate(self, context: Context) -> float:
        left = to_number(self.left.evaluate(context))
        right = to_number(self.right.evaluate(context))
        return self._apply(left, right)

    def __str__(self) -> str:
        return f"{self.left} {self.op} {self.right}"


class Negate(Expr):
    def __init__(self, operand: Expr) -> None:
        self.operand = operand

    def evaluate(self, context: Context) -> float:
        return -to_number(self.operand.evaluate(context))

    def __str__(self) -> str:
        return f"-{self.operand}"




# ==== FUNCTION CALLS ==== #

class FunctionCall(Expr):
    def __init__(self, function: Function, args: list[Expr]) -> None:
        self.function = function
        self.args = args

    def evaluate(self, context: Context) -> Any:
        values = [arg.evaluate(context) for arg in self.args]
        return self.function.impl(context, *values)

    def __str__(self) -> str:
        return f"{self.function.name}({', '.join(str(arg) for arg in self.args)})"
