from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from .errors import DiceParseError
from .models import (
    AddBase,
    AddLayer,
    AddOperator,
    AddRecurse,
    ExpressionTree,
    MultBase,
    MultLayer,
    MultOperator,
    MultRecurse,
    Number,
    Roll,
    RollBase,
    RollOperator,
    RollRecurse,
    Start,
    SubExpression,
    SubExpressionBase,
    SubExpressionRecurse,
    Token,
    TokenKind,
)


_END_OF_STREAM = "end of stream"

# Each nesting level costs about eight stack frames in the parser and as many
# in the evaluator, so this keeps both well under the interpreter's limit.
DEFAULT_MAX_NESTING_DEPTH = 64

BaseT = TypeVar("BaseT")
OpT = TypeVar("OpT")
NodeT = TypeVar("NodeT")


class _TokenStream:
    def __init__(self, tokens: Sequence[Token], max_depth: int) -> None:
        self._tokens = tokens
        self._pos = 0
        self.depth = 0
        self.max_depth = max_depth

    def peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def next(self) -> Token | None:
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token

    def peek_kind(self) -> TokenKind | None:
        token = self.peek()
        return token.kind if token is not None else None


def _found(token: Token | None) -> str:
    return _END_OF_STREAM if token is None else token.describe()


def parse(tokens: Sequence[Token], max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> ExpressionTree:
    """Parse a full token sequence. Raises DiceParseError on the first problem.

    Parentheses may nest at most `max_depth` levels deep.
    """

    stream = _TokenStream(tokens, max_depth)
    start = _parse_start(stream)

    trailing = stream.peek()
    if trailing is not None:
        raise DiceParseError(_END_OF_STREAM, trailing.describe())

    return ExpressionTree(root=start, tokens=list(tokens))


def _parse_start(stream: _TokenStream) -> Start:
    return Start(inner=_parse_add_layer(stream))


def _parse_left_assoc(
    stream: _TokenStream,
    parse_base: Callable[[_TokenStream], BaseT],
    operator_kind: TokenKind,
    parse_operator: Callable[[_TokenStream], OpT],
    make_base: Callable[[BaseT], NodeT],
    make_recurse: Callable[[NodeT, OpT, BaseT], NodeT],
) -> NodeT:
    """Shared loop for the binary levels: base { operator base }, folded to the left."""

    left = make_base(parse_base(stream))
    while stream.peek_kind() == operator_kind:
        op = parse_operator(stream)
        right = parse_base(stream)
        left = make_recurse(left, op, right)
    return left


def _operator_parser(
    kind: TokenKind, name: str, symbols: dict[str, OpT]
) -> Callable[[_TokenStream], OpT]:
    expected_symbols = " or ".join(f'"{s}"' for s in symbols)

    def parse_operator(stream: _TokenStream) -> OpT:
        token = stream.next()
        if token is None or token.kind != kind:
            raise DiceParseError(name, _found(token))
        try:
            return symbols[token.text]
        except KeyError:
            raise DiceParseError(expected_symbols, token.describe()) from None

    return parse_operator


_parse_add_operator: Callable[[_TokenStream], AddOperator] = _operator_parser(
    "add_operator", "AddOperator", {"+": "add", "-": "subtract"}
)
_parse_mult_operator: Callable[[_TokenStream], MultOperator] = _operator_parser(
    "mult_operator", "MultOperator", {"*": "multiply", "/": "divide"}
)
_parse_roll_operator: Callable[[_TokenStream], RollOperator] = _operator_parser(
    "roll_separator", "RollOperator", {"d": "d"}
)


def _parse_add_layer(stream: _TokenStream) -> AddLayer:
    return _parse_left_assoc(
        stream, _parse_mult_layer, "add_operator", _parse_add_operator, AddBase, AddRecurse
    )


def _parse_mult_layer(stream: _TokenStream) -> MultLayer:
    return _parse_left_assoc(
        stream, _parse_roll, "mult_operator", _parse_mult_operator, MultBase, MultRecurse
    )


def _parse_roll(stream: _TokenStream) -> Roll:
    return _parse_left_assoc(
        stream, _parse_sub_expression, "roll_separator", _parse_roll_operator, RollBase, RollRecurse
    )


def _parse_sub_expression(stream: _TokenStream) -> SubExpression:
    token = stream.peek()
    if token is not None and token.kind == "open_parenthesis":
        if stream.depth >= stream.max_depth:
            raise DiceParseError(
                f"at most {stream.max_depth} nested parentheses", f"{token.describe()} at depth {stream.depth + 1}"
            )
        stream.next()
        stream.depth += 1
        nested = _parse_start(stream)
        closing = stream.next()
        if closing is None or closing.kind != "close_parenthesis":
            raise DiceParseError('")"', _found(closing))
        stream.depth -= 1
        return SubExpressionRecurse(nested=nested)

    if token is not None and token.kind == "number":
        return SubExpressionBase(number=_parse_number(stream))

    raise DiceParseError('Number or "("', _found(token))


def _parse_number(stream: _TokenStream) -> Number:
    token = stream.next()
    if token is None or token.kind != "number":
        raise DiceParseError("Number", _found(token))
    return Number(text=token.text)
