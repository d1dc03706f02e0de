"""
Tokenizer for the lint rule language.

Produces a flat list of Token objects terminated by an EOF token. Keywords
(``and``, ``or``, ``not``, ``in``, ``tags``, ``family``, ``true``, ``false``)
are recognised case-sensitively; everything else that looks like a bare word
is a syntax error since the language has no free identifiers.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..errors import ParseError

NUMBER = "NUMBER"
STRING = "STRING"
KEYWORD = "KEYWORD"
OP = "OP"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"
COMMA = "COMMA"
EOF = "EOF"

KEYWORDS = {"and", "or", "not", "in", "tags", "family", "true", "false"}

# Longest operators first so ">=" wins over ">".
_TOKEN_SPEC = [
    ("WS", r"\s+"),
    (NUMBER, r"-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?"),
    (STRING, r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\''),
    (OP, r"&&|\|\||==|!=|>=|<=|>|<|!"),
    (LPAREN, r"\("),
    (RPAREN, r"\)"),
    (LBRACKET, r"\["),
    (RBRACKET, r"\]"),
    (COMMA, r","),
    ("WORD", r"[A-Za-z_][A-Za-z0-9_]*"),
]
_MASTER_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))
_ESCAPE_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    position: int

    def is_op(self, *ops: str) -> bool:
        return self.kind == OP and self.value in ops

    def is_keyword(self, *words: str) -> bool:
        return self.kind == KEYWORD and self.value in words


def _unquote(raw: str) -> str:
    return _ESCAPE_RE.sub(r"\1", raw[1:-1])


def tokenize(source: str) -> List[Token]:
    """
    Split a rule expression into tokens.

    Raises:
        ParseError: on an unterminated string or an unexpected character
    """
    tokens: List[Token] = []
    pos = 0
    length = len(source)
    while pos < length:
        match = _MASTER_RE.match(source, pos)
        if match is None:
            if source[pos] in "\"'":
                raise ParseError("Unterminated string literal", source, pos)
            raise ParseError(f"Unexpected character {source[pos]!r}", source, pos)
        kind = match.lastgroup
        text = match.group()
        if kind == "WORD":
            if text not in KEYWORDS:
                raise ParseError(f"Unknown name {text!r}", source, pos)
            tokens.append(Token(KEYWORD, text, pos))
        elif kind == STRING:
            tokens.append(Token(STRING, _unquote(text), pos))
        elif kind != "WS":
            tokens.append(Token(kind, text, pos))
        pos = match.end()
    tokens.append(Token(EOF, "", length))
    return tokens
