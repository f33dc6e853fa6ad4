"""Inspection tools for the engine: text rendering, probability heat-maps and forest stats."""

from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from .facade import ProbabilityFacade
from .manager import ChainManager


def format_hints(facade: ProbabilityFacade, *, show_coords: bool = True) -> str:
    """
    Format the engine's current view of the board as a human-readable string.

    Args:
        facade: Engine facade whose board and classification will be displayed.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where revealed cells show their clue (blank for 0, '?'
        for an unknown clue), hidden cells show 'F' (guaranteed mine),
        'S' (guaranteed safe), 'L' (lowest probability) or '.'.
    """
    board = facade.board
    w, h = board.width, board.height

    def cell_char(x: int, y: int) -> str:
        cell = (x, y)
        if board.is_revealed(cell):
            clue = board.clue(cell)
            if clue is None:
                return "?"
            return " " if clue == 0 else str(clue)
        if cell in facade.flag:
            return "F"
        if cell in facade.safe:
            return "S"
        if cell in facade.lowest:
            return "L"
        return "."

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{x:2d}" for x in range(w))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * w - 1))

    for y in range(h):
        row = " ".join(f" {cell_char(x, y)}" for x in range(w))
        lines.append(f"{y:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def probability_grid(facade: ProbabilityFacade) -> np.ndarray:
    """
    Build a height x width array of mine probabilities.

    Frontier cells get their exact share of consistent placements, unused
    cells the average density estimate. Revealed cells, and unused cells
    before any density is known, are NaN.
    """
    board = facade.board
    grid = np.full((board.height, board.width), np.nan, dtype=float)
    for (x, y), p in facade.classification.probabilities.items():
        grid[y, x] = p
    return grid


def plot_probability_heatmap(
    facade: ProbabilityFacade,
    *,
    ax: Optional[plt.Axes] = None,
    show: bool = False,
) -> plt.Axes:
    """
    Plot the probability grid with guaranteed mines and safes annotated.

    Args:
        facade: Engine facade to plot.
        ax: Axes to draw on; a new figure is created when omitted.
        show: If True, call plt.show() after drawing.

    Returns:
        The Axes that was drawn on.
    """
    grid = probability_grid(facade)
    if ax is None:
        _, ax = plt.subplots()  # type: ignore[misc]

    image = ax.imshow(grid, cmap="RdYlGn_r", vmin=0.0, vmax=1.0)  # type: ignore[misc]
    ax.figure.colorbar(image, ax=ax, label="Mine probability")  # type: ignore[misc]

    for x, y in facade.flag:
        ax.text(x, y, "F", ha="center", va="center", color="white")  # type: ignore[misc]
    for x, y in facade.safe:
        ax.text(x, y, "S", ha="center", va="center", color="black")  # type: ignore[misc]

    ax.set_xticks(np.arange(facade.board.width))  # type: ignore[misc]
    ax.set_yticks(np.arange(facade.board.height))  # type: ignore[misc]
    ax.set_title(
        f"{facade.classification.total_chains} consistent placements"
    )  # type: ignore[misc]

    if show:
        plt.tight_layout()
        plt.show()  # type: ignore[misc]
    return ax


def summarize_forest(manager: ChainManager) -> Dict[str, float]:
    """
    Collect size statistics about a manager's chain forest.

    Returns:
        Dict with keys:
        - chains: number of nodes, root included
        - leaves: number of consistent placements
        - max_depth: deepest leaf below the root
        - mean_leaf_mines: average mines per placement (0 with no leaves)
        - frontier, unused, revealed: sizes of the manager's cell sets
    """
    leaves = manager.leaves()
    depths: List[int] = [leaf.depth() for leaf in leaves]
    mines: List[int] = [len(leaf.mines) for leaf in leaves]

    return {
        "chains": float(manager.chain_count()),
        "leaves": float(len(depths)),
        "max_depth": float(max(depths)) if depths else 0.0,
        "mean_leaf_mines": float(np.mean(mines)) if mines else 0.0,
        "frontier": float(len(manager.frontier)),
        "unused": float(len(manager.unused)),
        "revealed": float(len(manager.revealed)),
    }
