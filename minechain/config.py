"""Engine constants and input normalisation for clue grids and mine budgets."""

from typing import Optional, Union

# Tolerance used by every floating-point comparison in classification.
EPSILON: float = 1e-4

# Bits packed into each fingerprint word.
FINGERPRINT_WORD_BITS: int = 53

# Clue sentinels.
MINE = "mine"
UNKNOWN = None

Clue = Union[int, str, None]

_MINE_NOTATIONS = {"m", "mine", "*"}
_UNKNOWN_NOTATIONS = {"?", "unknown", ""}


def parse_clue(value: object) -> Clue:
    """
    Normalise one cell of a host clue grid.

    Accepted notations:
        - integers 0..8 and the digit strings "0".."8"
        - "empty" (same as 0)
        - "M", "mine" or "*" for a mine
        - None, "?" or "unknown" for a cell whose value must not be assumed

    Returns:
        An int in 0..8, MINE, or UNKNOWN.

    Raises:
        ValueError: If the value is not a recognised clue.
    """
    if value is None:
        return UNKNOWN
    if isinstance(value, bool):
        raise ValueError(f"Unrecognised clue value: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 8:
            return value
        raise ValueError(f"Clue must be between 0 and 8, got {value}.")
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _MINE_NOTATIONS:
            return MINE
        if token in _UNKNOWN_NOTATIONS:
            return UNKNOWN
        if token == "empty":
            return 0
        if token.isdigit() and 0 <= int(token) <= 8:
            return int(token)
    raise ValueError(f"Unrecognised clue value: {value!r}")


def resolve_mine_budget(width: int, height: int, mines: Union[int, float]) -> int:
    """
    Turn a mine count or a mine density into a mine budget for the board.

    Args:
        width: Board width.
        height: Board height.
        mines: An absolute count (clipped to [0, width*height]) or a float
            density (clipped to [0, 1] and scaled by the number of cells).

    Returns:
        The mine budget as an int.

    Raises:
        TypeError: If mines is a bool or not a number.
    """
    cells = width * height
    if isinstance(mines, bool) or not isinstance(mines, (int, float)):
        raise TypeError("mines must be an int count or a float density.")
    if isinstance(mines, int):
        return max(0, min(cells, mines))
    density = max(0.0, min(1.0, mines))
    return int(round(cells * density))


def is_numbered(clue: Optional[Clue]) -> bool:
    """Return True if the clue is a mine count rather than a sentinel."""
    return isinstance(clue, int) and not isinstance(clue, bool)
