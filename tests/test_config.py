import pytest

from minechain.config import MINE, UNKNOWN, parse_clue, resolve_mine_budget


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, 0),
        (8, 8),
        ("3", 3),
        ("empty", 0),
        ("M", MINE),
        ("mine", MINE),
        (None, UNKNOWN),
        ("?", UNKNOWN),
    ],
)
def test_parse_clue_accepts_host_notations(value, expected):
    assert parse_clue(value) == expected


@pytest.mark.parametrize("value", [9, -1, "x", True, 1.5])
def test_parse_clue_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_clue(value)


def test_mine_budget_from_count_is_clipped():
    assert resolve_mine_budget(4, 4, 10) == 10
    assert resolve_mine_budget(4, 4, 99) == 16
    assert resolve_mine_budget(4, 4, -3) == 0


def test_mine_budget_from_density():
    assert resolve_mine_budget(10, 10, 0.15) == 15
    assert resolve_mine_budget(10, 10, 2.0) == 100


def test_mine_budget_rejects_bool():
    with pytest.raises(TypeError):
        resolve_mine_budget(3, 3, True)
