"""
Recursive descent parser turning XPath 1.0 source into an expression tree.

Grammar, lowest precedence first:

    Expr          := OrExpr
    OrExpr        := AndExpr ('or' AndExpr)*
    AndExpr       := EqualityExpr ('and' EqualityExpr)*
    EqualityExpr  := RelationalExpr (('=' | '!=') RelationalExpr)*
    RelationalExpr:= AdditiveExpr (('<' | '<=' | '>' | '>=') AdditiveExpr)*
    AdditiveExpr  := MultiplicativeExpr (('+' | '-') MultiplicativeExpr)*
    Multiplicative:= UnaryExpr (('*' | 'div' | 'mod') UnaryExpr)*
    UnaryExpr     := '-' UnaryExpr | UnionExpr
    UnionExpr     := PathExpr ('|' PathExpr)*
    PathExpr      := LocationPath | FilterExpr (('/' | '//') RelativePath)?
    FilterExpr    := PrimaryExpr Predicate*
"""

from __future__ import annotations

from html_xpath.core.errors import ExpressionError
from html_xpath.xpath import axes
from html_xpath.xpath.expr import (
    AndExpr,
    Arithmetic,
    Comparison,
    Expr,
    FilterExpr,
    FunctionCall,
    Literal,
    LocationPath,
    NameTest,
    Negate,
    Number,
    OrExpr,
    Step,
    TypeTest,
    UnionExpr,
)
from html_xpath.xpath.functions import FUNCTIONS
from html_xpath.xpath.lexer import LITERAL, NAME, NUMBER, OPERATOR, SYMBOL, Token, tokenize

NODE_TYPES = frozenset({"node", "text", "comment", "processing-instruction"})

# Functions whose arguments must be node-sets
_NODE_SET_FUNCTIONS = frozenset({"count", "sum", "local-name", "name", "namespace-uri"})




# ==== PARSER ==== #

class Parser:
    """Parses one XPath expression; create a new instance per expression."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens = tokenize(source)
        self.pos = 0




    # --► TOKEN ACCESS

    @property
    def current(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def peek(self) -> Token | None:
        if self.pos + 1 < len(self.tokens):
            return self.tokens[self.pos + 1]
        return None

    def advance(self) -> Token:
        token = self.current
        if token is None:
            raise self.error("unexpected end of expression")
        self.pos += 1
        return token

    def at(self, kind: str, *values: str) -> bool:
        token = self.current
        return token is not None and token.kind == kind and token.value in values

    def expect(self, value: str) -> Token:
        token = self.current
        if token is None or token.kind != SYMBOL or token.value != value:
            found = "end of expression" if token is None else repr(token.value)
            raise self.error(f"expected {value!r} but found {found}")
        self.pos += 1
        return token

    def error(self, message: str, token: Token | None = None) -> ExpressionError:
        token = token or self.current
        position = token.position if token is not None else len(self.source)
        return ExpressionError(message, self.source, position)




    # --► ENTRY POINT

    def parse(self) -> Expr:
        """
        Parse the whole source.

        Raises:
            ExpressionError: If the source is empty, malformed, or has
                tokens left over after a complete expression
        """
        if not self.tokens:
            raise ExpressionError("empty expression", self.source)
        expr = self._or_expr()
        if self.current is not None:
            raise self.error(f"unexpected token {self.current.value!r}")
        return expr




    # --► OPERATORS

    def _or_expr(self) -> Expr:
        expr = self._and_expr()
        while self.at(OPERATOR, "or"):
            self.advance()
            expr = OrExpr(expr, self._and_expr())
        return expr

    def _and_expr(self) -> Expr:
        expr = self._equality_expr()
        while self.at(OPERATOR, "and"):
            self.advance()
            expr = AndExpr(expr, self._equality_expr())
        return expr

    def _equality_expr(self) -> Expr:
        expr = self._relational_expr()
        while self.at(OPERATOR, "=", "!="):
            op = self.advance().value
            expr = Comparison(op, expr, self._relational_expr())
        return expr

    def _relational_expr(self) -> Expr:
        expr = self._additive_expr()
        while self.at(OPERATOR, "<", "<=", ">", ">="):
            op = self.advance().value
            expr = Comparison(op, expr, self._additive_expr())
        return expr

    def _additive_expr(self) -> Expr:
        expr = self._multiplicative_expr()
        while self.at(OPERATOR, "+", "-"):
            op = self.advance().value
            expr = Arithmetic(op, expr, self._multiplicative_expr())
        return expr

    def _multiplicative_expr(self) -> Expr:
        expr = self._unary_expr()
        while self.at(OPERATOR, "*", "div", "mod"):
            op = self.advance().value
            expr = Arithmetic(op, expr, self._unary_expr())
        return expr

    def _unary_expr(self) -> Expr:
        if self.at(OPERATOR, "-"):
            self.advance()
            return Negate(self._unary_expr())
        return self._union_expr()

    def _union_expr(self) -> Expr:
        expr = self._path_expr()
        while self.at(OPERATOR, "|"):
            token = self.advance()
            right = self._path_expr()
            if not (expr.returns_nodes and right.returns_nodes):
                raise self.error("union operands must be node-sets", token)
            expr = UnionExpr(expr, right)
        return expr




    # --► PATHS

    def _path_expr(self) -> Expr:
        token = self.current
        if token is None:
            raise self.error("unexpected end of expression")

        if not self._starts_filter_expr(token):
            return self._location_path()

        expr = self._primary_expr()
        predicates = self._predicates()
        if predicates:
            if not expr.returns_nodes:
                raise self.error("predicates require a node-set", token)
            expr = FilterExpr(expr, predicates)

        if self.at(OPERATOR, "/", "//"):
            if not expr.returns_nodes:
                raise self.error("path steps require a node-set", token)
            return _make_path(self._path_tail(), start=expr)
        return expr

    def _starts_filter_expr(self, token: Token) -> bool:
        if token.kind in (NUMBER, LITERAL):
            return True
        if token.kind == SYMBOL:
            return token.value in ("(", "$")
        if token.kind == NAME and token.value not in NODE_TYPES:
            following = self.peek()
            return following is not None and following.value == "("
        return False

    def _location_path(self) -> LocationPath:
        if self.at(OPERATOR, "/"):
            self.advance()
            steps = self._relative_path() if self._starts_step() else []
            return _make_path(steps, absolute=True)
        if self.at(OPERATOR, "//"):
            self.advance()
            steps = [_descendant_or_self(), *self._relative_path()]
            return _make_path(steps, absolute=True)
        return _make_path(self._relative_path())

    def _path_tail(self) -> list[Step]:
        steps = []
        if self.advance().value == "//":
            steps.append(_descendant_or_self())
        steps.extend(self._relative_path())
        return steps

    def _relative_path(self) -> list[Step]:
        steps = [self._step()]
        while self.at(OPERATOR, "/", "//"):
            if self.advance().value == "//":
                steps.append(_descendant_or_self())
            steps.append(self._step())
        return steps

    def _starts_step(self) -> bool:
        token = self.current
        if token is None:
            return False
        return token.kind == NAME or (token.kind == SYMBOL and token.value in (".", "..", "@"))

    def _step(self) -> Step:
        token = self.current
        if token is None:
            raise self.error("expected a location step")

        if token.kind == SYMBOL and token.value == ".":
            self.advance()
            return Step(axes.SELF, TypeTest("node"))
        if token.kind == SYMBOL and token.value == "..":
            self.advance()
            return Step(axes.PARENT, TypeTest("node"))

        axis = axes.CHILD
        following = self.peek()
        if token.kind == SYMBOL and token.value == "@":
            self.advance()
            axis = axes.ATTRIBUTE
        elif token.kind == NAME and following is not None and following.value == "::":
            if token.value == "namespace":
                raise self.error("the namespace axis is not supported")
            if token.value not in axes.AXES:
                raise self.error(f"unknown axis {token.value!r}")
            axis = token.value
            self.advance()
            self.advance()

        test = self._node_test()
        return Step(axis, test, self._predicates())

    def _node_test(self) -> NameTest | TypeTest:
        token = self.current
        if token is None or token.kind != NAME:
            found = "end of expression" if token is None else repr(token.value)
            raise self.error(f"expected a node test but found {found}")
        self.advance()

        if token.value in NODE_TYPES and self.at(SYMBOL, "("):
            self.advance()
            if token.value == "processing-instruction" and self.current is not None and self.current.kind == LITERAL:
                self.advance()
            self.expect(")")
            return TypeTest(token.value)

        prefix, _, local = token.value.rpartition(":")
        return NameTest(local, prefix)

    def _predicates(self) -> list[Expr]:
        predicates = []
        while self.at(SYMBOL, "["):
            self.advance()
            predicates.append(self._or_expr())
            self.expect("]")
        return predicates




    # --► PRIMARY EXPRESSIONS

    def _primary_expr(self) -> Expr:
        token = self.current
        if token is None:
            raise self.error("unexpected end of expression")

        if token.kind == LITERAL:
            self.advance()
            return Literal(token.value[1:-1])
        if token.kind == NUMBER:
            self.advance()
            return Number(float(token.value))
        if token.kind == SYMBOL and token.value == "(":
            self.advance()
            expr = self._or_expr()
            self.expect(")")
            return expr
        if token.kind == SYMBOL and token.value == "$":
            raise self.error("variable references are not supported")
        return self._function_call()

    def _function_call(self) -> FunctionCall:
        name = self.advance()
        self.expect("(")
        args: list[Expr] = []
        if not self.at(SYMBOL, ")"):
            args.append(self._or_expr())
            while self.at(SYMBOL, ","):
                self.advance()
                args.append(self._or_expr())
        self.expect(")")

        function = FUNCTIONS.get(name.value)
        if function is None:
            raise self.error(f"unknown function {name.value}()", name)
        if len(args) < function.min_args or (
            function.max_args is not None and len(args) > function.max_args
        ):
            raise self.error(f"wrong number of arguments to {name.value}()", name)
        if name.value in _NODE_SET_FUNCTIONS and not all(arg.returns_nodes for arg in args):
            raise self.error(f"{name.value}() requires a node-set argument", name)

        return FunctionCall(function, args)




# ==== PATH HELPERS ==== #

def _descendant_or_self() -> Step:
    return Step(axes.DESCENDANT_OR_SELF, TypeTest("node"))


def _make_path(
    steps: list[Step],
    absolute: bool = False,
    start: Expr | None = None,
) -> LocationPath:
    """
    Build a location path, folding `//name` into a descendant step.

    descendant-or-self::node()/child::x selects the same nodes as
    descendant::x as long as the child step has no predicates; positional
    predicates count per parent and must keep the two-step form.
    """
    folded: list[Step] = []
    for step in steps:
        previous = folded[-1] if folded else None
        if (
            previous is not None
            and previous.axis == axes.DESCENDANT_OR_SELF
            and isinstance(previous.test, TypeTest)
            and previous.test.name == "node"
            and not previous.predicates
            and step.axis == axes.CHILD
            and not step.predicates
        ):
            folded[-1] = Step(axes.DESCENDANT, step.test)
        else:
            folded.append(step)
    return LocationPath(folded, absolute=absolute, start=start)
