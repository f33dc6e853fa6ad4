from typing import List, Sequence, Set, Tuple

import matplotlib
import pytest

matplotlib.use("Agg")

from minechain.utils import get_neighborhoods  # noqa: E402


def clues_from_layout(layout: Sequence[str]) -> List[List[object]]:
    """Turn rows like ".*." into a clue grid ("M" for mines, counts elsewhere)."""
    height, width = len(layout), len(layout[0])
    nbrs = get_neighborhoods(width, height)
    grid: List[List[object]] = []
    for y in range(height):
        row: List[object] = []
        for x in range(width):
            if layout[y][x] == "*":
                row.append("M")
            else:
                row.append(sum(1 for nx, ny in nbrs[(x, y)] if layout[ny][nx] == "*"))
        grid.append(row)
    return grid


def mines_in_layout(layout: Sequence[str]) -> Set[Tuple[int, int]]:
    return {
        (x, y)
        for y, row in enumerate(layout)
        for x, ch in enumerate(row)
        if ch == "*"
    }


CENTER_MINE = ["...", ".*.", "..."]
CORNER_MINE = ["...", "...", "..*"]
MIXED = [
    ".....",
    ".*...",
    "...*.",
    "*....",
    "...*.",
]


@pytest.fixture
def center_mine_clues() -> List[List[object]]:
    return clues_from_layout(CENTER_MINE)


@pytest.fixture
def corner_mine_clues() -> List[List[object]]:
    return clues_from_layout(CORNER_MINE)
