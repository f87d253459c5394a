import pytest

from mcp_dice_expression.dice import evaluate_text


@pytest.mark.parametrize(("count", "sides"), [(1, 6), (3, 4), (5, 1), (2, 100), (10, 20)])
def test_roll_stays_in_bounds(count, sides):
    for _ in range(200):
        assert count <= evaluate_text(f"{count}d{sides}") <= count * sides


def test_every_face_shows_up():
    seen = {evaluate_text("1d6") for _ in range(600)}
    assert seen == {1, 2, 3, 4, 5, 6}


@pytest.mark.parametrize("sides", ["1", "20", "%%"])
def test_zero_dice_is_always_zero(sides):
    for _ in range(50):
        assert evaluate_text(f"0d{sides}") == 0


def test_percentile_roll_stays_in_bounds():
    # "1%" decodes to 100.
    for _ in range(200):
        assert 1 <= evaluate_text("1d1%") <= 100
