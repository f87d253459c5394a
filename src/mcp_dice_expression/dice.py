from __future__ import annotations

import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from .config import settings
from .errors import DiceError
from .evaluate import RandomSource, evaluate
from .lexer import normalized_expression, tokenize
from .models import ExpressionTree, RollRecord, Token
from .parser import parse


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _require_text(text: str) -> None:
    if not text or not text.strip():
        raise DiceError(
            "[UNPARSEABLE_INPUT] Empty input. Example: '2d6+3' or '(1d4)d%'."
        )
    if len(text) > settings.max_input_length:
        raise DiceError(
            f"[INPUT_TOO_LONG] Expressions are limited to {settings.max_input_length} characters."
        )


def _parse_text(text: str) -> tuple[list[Token], ExpressionTree]:
    _require_text(text)
    tokens = tokenize(text)
    return tokens, parse(tokens, max_depth=settings.max_nesting_depth)


def evaluate_text(text: str, rng: RandomSource | None = None) -> int:
    """Tokenize, parse and evaluate in one go. Raises DiceError for invalid input."""

    _tokens, tree = _parse_text(text)
    return evaluate(tree, rng=rng, max_dice=settings.max_dice)


def _explain(rolls: list[RollRecord], total: int) -> str:
    parts = [f"{r.count}d{r.sides}: rolls {r.rolls} => {r.subtotal}" for r in rolls]
    parts.append(f"total => {total}")
    return "; ".join(parts)


def roll_from_text(text: str, rng: RandomSource | None = None) -> dict[str, Any]:
    """Parse, validate, then roll. Raises DiceError for invalid input."""

    tokens, tree = _parse_text(text)

    rolls: list[RollRecord] = []
    total = evaluate(tree, rng=rng, trace=rolls, max_dice=settings.max_dice)

    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "normalized_expression": normalized_expression(tokens),
        "rng": {
            "source": "secrets.SystemRandom" if rng is None else type(rng).__name__,
            "nonce": str(uuid.uuid4()),
        },
        "rolls": [asdict(r) for r in rolls],
        "total": total,
        "explanation": _explain(rolls, total),
    }
