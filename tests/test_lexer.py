import re

import pytest

from mcp_dice_expression.lexer import normalized_expression, tokenize
from mcp_dice_expression.models import Token


@pytest.mark.parametrize(
    ("text", "tokens"),
    [
        ("", []),
        ("   ", []),
        (
            "2d6 + 3",
            [
                Token("number", "2"),
                Token("roll_separator", "d"),
                Token("number", "6"),
                Token("add_operator", "+"),
                Token("number", "3"),
            ],
        ),
        (
            "(1d4)d%",
            [
                Token("open_parenthesis", "("),
                Token("number", "1"),
                Token("roll_separator", "d"),
                Token("number", "4"),
                Token("close_parenthesis", ")"),
                Token("roll_separator", "d"),
                Token("number", "%"),
            ],
        ),
        ("12%3%", [Token("number", "12%3%")]),
        ("1 2", [Token("number", "1"), Token("number", "2")]),
        ("8/2-1", [
            Token("number", "8"),
            Token("mult_operator", "/"),
            Token("number", "2"),
            Token("add_operator", "-"),
            Token("number", "1"),
        ]),
        ("D\t*x", [
            Token("undefined", "D"),
            Token("mult_operator", "*"),
            Token("undefined", "x"),
        ]),
    ],
)
def test_tokenize(text, tokens):
    assert tokenize(text) == tokens


@pytest.mark.parametrize(
    "text",
    ["2d6 + 3", " ( 1d4 ) d % ", "roll 3d8 please!", "10 -\n2\t- 3", "½d6²"],
)
def test_token_texts_rebuild_input_without_whitespace(text):
    assert normalized_expression(tokenize(text)) == re.sub(r"\s+", "", text)


def test_non_ascii_digits_are_undefined():
    assert tokenize("²") == [Token("undefined", "²")]


def test_tokenize_is_deterministic():
    text = "(2d%5 + 7) * 3 / 1d4 ?"
    assert tokenize(text) == tokenize(text)
