from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from typing import Any, Protocol, TypeVar, assert_never

from .errors import DiceEvaluationError
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
    RollRecord,
    RollRecurse,
    Start,
    SubExpression,
    SubExpressionBase,
    SubExpressionRecurse,
)


logger = logging.getLogger(__name__)

_DIGITS = "0123456789"
_PERCENT = "%"


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


class _BaseNode(Protocol):
    @property
    def inner(self) -> Any: ...


class _RecurseNode(Protocol):
    @property
    def left(self) -> Any: ...

    @property
    def op(self) -> Any: ...

    @property
    def right(self) -> Any: ...


BaseT = TypeVar("BaseT", bound=_BaseNode)
RecurseT = TypeVar("RecurseT", bound=_RecurseNode)
OperandT = TypeVar("OperandT")
OpT = TypeVar("OpT")


def evaluate(
    tree: ExpressionTree,
    rng: RandomSource | None = None,
    trace: list[RollRecord] | None = None,
    max_dice: int | None = None,
) -> int:
    """Evaluate a parsed tree once.

    Dice are drawn from `rng` (defaults to secrets.SystemRandom). When `trace` is
    given, one RollRecord is appended per roll, in evaluation order. A roll of
    more than `max_dice` dice fails before any draw.
    """

    root = tree.take()
    rng = rng if rng is not None else secrets.SystemRandom()
    return _Evaluator(rng, trace, max_dice).start(root)


def decode_number(text: str) -> int:
    """Decode a literal of digits and '%' markers.

    A leading '%' seeds the value with 1. After that each digit appends in base 10
    and each '%' multiplies by 100: "%5" -> 15, "5%" -> 500, "%%" -> 100.
    """

    if not text:
        raise DiceEvaluationError("[INVALID_NUMBER] Empty number literal.")

    value = 0
    rest = text
    if text[0] == _PERCENT:
        value = 1
        rest = text[1:]

    for ch in rest:
        if ch in _DIGITS:
            value = value * 10 + _DIGITS.index(ch)
        elif ch == _PERCENT:
            value *= 100
        else:
            raise DiceEvaluationError(
                f"[INVALID_NUMBER] Unexpected character {ch!r} in number literal {text!r}."
            )
    return value


def _add(left: int, op: AddOperator, right: int) -> int:
    if op == "add":
        return left + right
    if op == "subtract":
        return left - right
    assert_never(op)


def _multiply(left: int, op: MultOperator, right: int) -> int:
    if op == "multiply":
        return left * right
    if op == "divide":
        if right == 0:
            raise DiceEvaluationError(f"[DIVISION_BY_ZERO] Cannot divide {left} by zero.")
        # Truncate toward zero.
        quotient = abs(left) // abs(right)
        return -quotient if (left < 0) != (right < 0) else quotient
    assert_never(op)


class _Evaluator:
    def __init__(self, rng: RandomSource, trace: list[RollRecord] | None, max_dice: int | None) -> None:
        self._rng = rng
        self._trace = trace
        self._max_dice = max_dice

    def start(self, node: Start) -> int:
        return self.add_layer(node.inner)

    def add_layer(self, node: AddLayer) -> int:
        return self._fold_left(node, AddBase, AddRecurse, self.mult_layer, _add)

    def mult_layer(self, node: MultLayer) -> int:
        return self._fold_left(node, MultBase, MultRecurse, self.roll, _multiply)

    def roll(self, node: Roll) -> int:
        return self._fold_left(node, RollBase, RollRecurse, self.sub_expression, self._roll_dice)

    def sub_expression(self, node: SubExpression) -> int:
        if isinstance(node, SubExpressionBase):
            return self.number(node.number)
        if isinstance(node, SubExpressionRecurse):
            return self.start(node.nested)
        assert_never(node)

    def number(self, node: Number) -> int:
        return decode_number(node.text)

    @staticmethod
    def _fold_left(
        node: BaseT | RecurseT,
        base_type: type[BaseT],
        recurse_type: type[RecurseT],
        evaluate_operand: Callable[[OperandT], int],
        apply: Callable[[int, OpT, int], int],
    ) -> int:
        # Walk the left spine iteratively; long chains like 1+1+...+1 would
        # otherwise recurse once per operator.
        chain: list[RecurseT] = []
        while isinstance(node, recurse_type):
            chain.append(node)
            node = node.left

        if not isinstance(node, base_type):
            raise TypeError(f"Unexpected {type(node).__name__} under {recurse_type.__name__}")

        value = evaluate_operand(node.inner)
        for step in reversed(chain):
            value = apply(value, step.op, evaluate_operand(step.right))
        return value

    def _roll_dice(self, count: int, op: RollOperator, sides: int) -> int:
        if count < 0:
            raise DiceEvaluationError(
                f"[NEGATIVE_DICE_COUNT] Cannot roll a negative number of dice: {count}. Example: '2d6'."
            )
        if self._max_dice is not None and count > self._max_dice:
            raise DiceEvaluationError(
                f"[TOO_MANY_DICE] Cannot roll more than {self._max_dice} dice at once, got {count}."
            )

        if count == 0:
            rolls: list[int] = []
        else:
            if sides < 1:
                raise DiceEvaluationError(
                    f"[INVALID_DIE] A die needs at least one side, got {sides}. Example: '{count}d6'."
                )
            rolls = [self._rng.randint(1, sides) for _ in range(count)]

        subtotal = sum(rolls)
        logger.debug("rolled %s%s%s: %s => %s", count, op, sides, rolls, subtotal)
        if self._trace is not None:
            self._trace.append(RollRecord(count=count, sides=sides, rolls=rolls, subtotal=subtotal))
        return subtotal
