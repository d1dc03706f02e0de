"""
Recursive-descent parser for lint rule expressions.

Grammar:

    expression := or_expr
    or_expr    := and_expr (("||" | "or") and_expr)*
    and_expr   := not_expr (("&&" | "and") not_expr)*
    not_expr   := ("!" | "not") not_expr | comparison
    comparison := operand [CMP operand]
                | operand ["not"] "in" (list | "tags")
    operand    := NUMBER | STRING | "true" | "false" | "family"
                | "tags" "[" STRING "]" | "(" expression ")"
    list       := "[" [literal ("," literal)*] "]"

Usage:
    from font_tagger.rules import RuleContext, compile_rule

    predicate = compile_rule('tags["/Expressive/Loud"] > 80 && family == "Roboto"')
    predicate(RuleContext({"/Expressive/Loud": 95}, "Roboto"))  # True
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Tuple

from ..errors import ParseError
from . import lexer
from .lexer import Token, tokenize
from .nodes import (
    And,
    Compare,
    FamilyName,
    HasTag,
    Literal,
    Membership,
    Node,
    Not,
    Or,
    RuleContext,
    TagScore,
    truthy,
)

# Combined depth of parentheses and negations a rule may use.
MAX_NESTING = 64

_COMPARISON_OPS = (">", ">=", "<", "<=", "==", "!=")


class _Parser:
    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = tokenize(source)
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != lexer.EOF:
            self.index += 1
        return token

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.current
        found = "end of input" if token.kind == lexer.EOF else repr(token.value)
        return ParseError(f"{message}, found {found}", self.source, token.position)

    def expect(self, kind: str, what: str) -> Token:
        if self.current.kind != kind:
            raise self.error(f"Expected {what}")
        return self.advance()

    def parse(self) -> Node:
        if self.current.kind == lexer.EOF:
            raise ParseError("Empty rule expression", self.source, 0)
        node = self.parse_or()
        if self.current.kind != lexer.EOF:
            raise self.error("Unexpected trailing input")
        return node

    def parse_or(self) -> Node:
        operands = [self.parse_and()]
        while self.current.is_op("||") or self.current.is_keyword("or"):
            self.advance()
            operands.append(self.parse_and())
        return operands[0] if len(operands) == 1 else Or(tuple(operands))

    def parse_and(self) -> Node:
        operands = [self.parse_not()]
        while self.current.is_op("&&") or self.current.is_keyword("and"):
            self.advance()
            operands.append(self.parse_not())
        return operands[0] if len(operands) == 1 else And(tuple(operands))

    def nest(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise self.error(f"Expression nested deeper than {MAX_NESTING} levels")

    def parse_not(self) -> Node:
        if self.current.is_op("!") or self.current.is_keyword("not"):
            self.advance()
            self.nest()
            node = Not(self.parse_not())
            self.depth -= 1
            return node
        return self.parse_comparison()

    def parse_comparison(self) -> Node:
        left = self.parse_operand()
        token = self.current
        if token.kind == lexer.OP and token.value in _COMPARISON_OPS:
            self.advance()
            return Compare(token.value, left, self.parse_operand())

        negate = False
        if token.is_keyword("not"):
            self.advance()
            negate = True
            if not self.current.is_keyword("in"):
                raise self.error("Expected 'in' after 'not'")
        if self.current.is_keyword("in"):
            self.advance()
            if self.current.is_keyword("tags"):
                self.advance()
                return HasTag(left, negate)
            return Membership(left, self.parse_list(), negate)
        return left

    def parse_list(self) -> Tuple[Node, ...]:
        self.expect(lexer.LBRACKET, "'[' or 'tags'")
        items: List[Node] = []
        if self.current.kind != lexer.RBRACKET:
            items.append(self.parse_literal())
            while self.current.kind == lexer.COMMA:
                self.advance()
                items.append(self.parse_literal())
        self.expect(lexer.RBRACKET, "']'")
        return tuple(items)

    def parse_literal(self) -> Node:
        token = self.current
        if token.kind == lexer.NUMBER:
            self.advance()
            return Literal(float(token.value))
        if token.kind == lexer.STRING:
            self.advance()
            return Literal(token.value)
        if token.is_keyword("true", "false"):
            self.advance()
            return Literal(token.value == "true")
        raise self.error("Expected a number, string or boolean")

    def parse_operand(self) -> Node:
        token = self.current
        if token.kind == lexer.LPAREN:
            self.advance()
            self.nest()
            node = self.parse_or()
            self.expect(lexer.RPAREN, "')'")
            self.depth -= 1
            return node
        if token.is_keyword("family"):
            self.advance()
            return FamilyName()
        if token.is_keyword("tags"):
            self.advance()
            self.expect(lexer.LBRACKET, "'[' after 'tags'")
            name = self.expect(lexer.STRING, "a quoted tag name")
            self.expect(lexer.RBRACKET, "']'")
            return TagScore(name.value)
        return self.parse_literal()


class Predicate:
    """A compiled rule; calling it with a RuleContext yields a bool."""

    def __init__(self, source: str, root: Node):
        self.source = source
        self.root = root

    def __call__(self, context: RuleContext) -> bool:
        return truthy(self.root.evaluate(context))

    def __repr__(self) -> str:
        return f"Predicate({self.source!r})"


def parse_expression(source: str) -> Node:
    return _Parser(source).parse()


@lru_cache(maxsize=512)
def compile_rule(source: str) -> Predicate:
    """
    Compile a rule expression into a predicate.

    Args:
        source: rule text, e.g. ``tags["/Expressive/Loud"] > 80``

    Returns:
        Predicate evaluable against a RuleContext

    Raises:
        ParseError: if the expression is malformed
    """
    return Predicate(source, parse_expression(source))
