from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from .errors import DiceEvaluationError


TokenKind: TypeAlias = Literal[
    "roll_separator",
    "open_parenthesis",
    "close_parenthesis",
    "number",
    "add_operator",
    "mult_operator",
    "undefined",
]

AddOperator: TypeAlias = Literal["add", "subtract"]
MultOperator: TypeAlias = Literal["multiply", "divide"]
# Single variant, mirrors AddOperator and MultOperator.
RollOperator: TypeAlias = Literal["d"]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    def describe(self) -> str:
        return f"{self.kind} {self.text!r}"


# Grammar, loosest to tightest:
#
#   Start         = AddLayer ;
#   AddLayer      = AddLayer, ("+" | "-"), MultLayer | MultLayer ;
#   MultLayer     = MultLayer, ("*" | "/"), Roll | Roll ;
#   Roll          = Roll, "d", SubExpression | SubExpression ;
#   SubExpression = "(", Start, ")" | Number ;
#   Number        = { digit | "%" }+ ;


@dataclass(frozen=True)
class Number:
    text: str


@dataclass(frozen=True)
class SubExpressionBase:
    number: Number


@dataclass(frozen=True)
class SubExpressionRecurse:
    nested: Start


SubExpression: TypeAlias = SubExpressionBase | SubExpressionRecurse


@dataclass(frozen=True)
class RollBase:
    inner: SubExpression


@dataclass(frozen=True)
class RollRecurse:
    left: Roll
    op: RollOperator
    right: SubExpression


Roll: TypeAlias = RollBase | RollRecurse


@dataclass(frozen=True)
class MultBase:
    inner: Roll


@dataclass(frozen=True)
class MultRecurse:
    left: MultLayer
    op: MultOperator
    right: Roll


MultLayer: TypeAlias = MultBase | MultRecurse


@dataclass(frozen=True)
class AddBase:
    inner: MultLayer


@dataclass(frozen=True)
class AddRecurse:
    left: AddLayer
    op: AddOperator
    right: MultLayer


AddLayer: TypeAlias = AddBase | AddRecurse


@dataclass(frozen=True)
class Start:
    inner: AddLayer


@dataclass
class ExpressionTree:
    """A parsed expression waiting to be evaluated. It can be taken only once."""

    root: Start | None
    tokens: list[Token] = field(default_factory=list)

    @property
    def consumed(self) -> bool:
        return self.root is None

    def take(self) -> Start:
        if self.root is None:
            raise DiceEvaluationError(
                "[TREE_CONSUMED] This expression tree has already been evaluated. Parse the input again."
            )
        root, self.root = self.root, None
        return root


@dataclass(frozen=True)
class RollRecord:
    count: int
    sides: int
    rolls: list[int]
    subtotal: int
