from __future__ import annotations

import re
from typing import cast

from .models import Token, TokenKind


# Every alternative is a named group, so `lastgroup` is always a TokenKind
# (or "whitespace", which is dropped).
_TOKEN_RE = re.compile(
    r"""
    (?P<whitespace>\s+)
    | (?P<number>[0-9%]+)
    | (?P<roll_separator>d)
    | (?P<open_parenthesis>\()
    | (?P<close_parenthesis>\))
    | (?P<add_operator>[+-])
    | (?P<mult_operator>[*/])
    | (?P<undefined>.)
    """,
    re.VERBOSE | re.DOTALL,
)


def tokenize(text: str) -> list[Token]:
    """Split raw input into tokens. Never fails; unknown characters become 'undefined'."""

    tokens: list[Token] = []
    for m in _TOKEN_RE.finditer(text):
        if m.lastgroup == "whitespace":
            continue
        tokens.append(Token(kind=cast(TokenKind, m.lastgroup), text=m.group()))
    return tokens


def normalized_expression(tokens: list[Token]) -> str:
    return "".join(t.text for t in tokens)
