"""Grid geometry and combinatorics helpers shared by the engine."""

import itertools
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

Cell = Tuple[int, int]

# (width, height) -> neighbour map, shared by every board of that size
_NEIGHBOR_CACHE: Dict[Tuple[int, int], Dict[Cell, Tuple[Cell, ...]]] = {}


def get_neighborhoods(width: int, height: int) -> Dict[Cell, Tuple[Cell, ...]]:
    """
    Map every cell of a width x height grid to its 8-connected neighbors.

    The map is built once per grid size and reused. Edge and corner cells
    get fewer neighbors (no wrap-around), listed in row-major order.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    cached = _NEIGHBOR_CACHE.get((width, height))
    if cached is None:
        cached = {
            (x, y): tuple(
                (nx, ny)
                for ny in range(max(0, y - 1), min(height, y + 2))
                for nx in range(max(0, x - 1), min(width, x + 2))
                if (nx, ny) != (x, y)
            )
            for y in range(height)
            for x in range(width)
        }
        _NEIGHBOR_CACHE[(width, height)] = cached
    return cached


def split_combinations(
    items: Sequence[T], k: int
) -> Optional[List[Tuple[Tuple[T, ...], Tuple[T, ...]]]]:
    """
    Enumerate every way to choose exactly k of the given items.

    Args:
        items: Distinct candidates. Their order is preserved in both halves
            of every returned pair.
        k: Number of items to choose.

    Returns:
        A list of (chosen, rest) pairs with len(chosen) == k and
        len(rest) == len(items) - k. For k == 0 this is a single pair with
        nothing chosen. Returns None when k is negative or exceeds the number
        of items, so that "no valid choice" is never confused with an empty
        enumeration.
    """
    n = len(items)
    if k < 0 or k > n:
        return None

    pairs: List[Tuple[Tuple[T, ...], Tuple[T, ...]]] = []
    for picked in itertools.combinations(range(n), k):
        picked_set = set(picked)
        chosen = tuple(items[i] for i in picked)
        rest = tuple(items[i] for i in range(n) if i not in picked_set)
        pairs.append((chosen, rest))
    return pairs
