from __future__ import annotations


class DiceError(ValueError):
    """User-facing errors. Messages start with a stable code like '[PARSE_ERROR]'."""


class DiceParseError(DiceError):
    def __init__(self, expected: str, found: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"[PARSE_ERROR] Expected {expected}, found {found}")


class DiceEvaluationError(DiceError):
    """Raised while evaluating a parsed tree. Evaluation stops at the first one."""
