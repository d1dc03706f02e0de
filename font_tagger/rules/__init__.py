"""
Lint rule language: tokenizer, parser and expression tree.
"""
from .nodes import MISSING, RuleContext
from .parser import Predicate, compile_rule, parse_expression

__all__ = [
    "MISSING",
    "Predicate",
    "RuleContext",
    "compile_rule",
    "parse_expression",
]
