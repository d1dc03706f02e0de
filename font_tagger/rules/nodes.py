"""
Expression tree for compiled lint rules.

Every node exposes ``evaluate(context)``. Evaluation never raises: a tag that
has no static score resolves to ``MISSING``, and any comparison involving
``MISSING`` or mismatched operand types is simply false.
"""
from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Tuple


class _Missing:
    """Value of ``tags["..."]`` when the font has no static score for the tag."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class RuleContext:
    """What a rule can see: static tag scores and the family name."""

    tag_scores: Mapping[str, float] = field(default_factory=dict)
    family_name: str = ""


_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(left: Any, right: Any) -> bool:
    if left is MISSING or right is MISSING:
        return False
    if _is_number(left) and _is_number(right):
        return True
    return type(left) is type(right)


def truthy(value: Any) -> bool:
    if value is MISSING:
        return False
    return bool(value)


class Node:
    def evaluate(self, context: RuleContext) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class Literal(Node):
    value: Any

    def evaluate(self, context: RuleContext) -> Any:
        return self.value


@dataclass(frozen=True)
class TagScore(Node):
    tag_name: str

    def evaluate(self, context: RuleContext) -> Any:
        score = context.tag_scores.get(self.tag_name)
        return MISSING if score is None else score


@dataclass(frozen=True)
class FamilyName(Node):
    def evaluate(self, context: RuleContext) -> Any:
        return context.family_name


@dataclass(frozen=True)
class Compare(Node):
    op: str
    left: Node
    right: Node

    def evaluate(self, context: RuleContext) -> bool:
        lhs = self.left.evaluate(context)
        rhs = self.right.evaluate(context)
        if not _comparable(lhs, rhs):
            return False
        return _COMPARATORS[self.op](lhs, rhs)


@dataclass(frozen=True)
class Membership(Node):
    """``operand in [..]``; list members that are MISSING never match."""

    needle: Node
    items: Tuple[Node, ...]
    negate: bool = False

    def evaluate(self, context: RuleContext) -> bool:
        value = self.needle.evaluate(context)
        if value is MISSING:
            return False
        found = False
        for item in self.items:
            candidate = item.evaluate(context)
            if _comparable(value, candidate) and value == candidate:
                found = True
                break
        return found != self.negate


@dataclass(frozen=True)
class HasTag(Node):
    """``"<tag>" in tags``."""

    needle: Node
    negate: bool = False

    def evaluate(self, context: RuleContext) -> bool:
        name = self.needle.evaluate(context)
        present = isinstance(name, str) and context.tag_scores.get(name) is not None
        return present != self.negate


@dataclass(frozen=True)
class Not(Node):
    operand: Node

    def evaluate(self, context: RuleContext) -> bool:
        return not truthy(self.operand.evaluate(context))


@dataclass(frozen=True)
class And(Node):
    operands: Tuple[Node, ...]

    def evaluate(self, context: RuleContext) -> bool:
        return all(truthy(operand.evaluate(context)) for operand in self.operands)


@dataclass(frozen=True)
class Or(Node):
    operands: Tuple[Node, ...]

    def evaluate(self, context: RuleContext) -> bool:
        return any(truthy(operand.evaluate(context)) for operand in self.operands)
