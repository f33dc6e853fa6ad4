import math

import matplotlib.pyplot as plt
import numpy as np
from conftest import clues_from_layout

from minechain.analysis import (
    format_hints,
    plot_probability_heatmap,
    probability_grid,
    summarize_forest,
)
from minechain.facade import ProbabilityFacade


def _flagged_pair():
    facade = ProbabilityFacade(clues_from_layout([".*"]), 1)
    facade.add_squares([(0, 0)])
    return facade


def test_format_hints_marks_flags():
    text = format_hints(_flagged_pair(), show_coords=False)
    assert text == " 1  F"


def test_format_hints_with_coordinates(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)
    facade.add_squares([(0, 0)])

    lines = format_hints(facade).splitlines()

    assert len(lines) == 2 + 3
    assert lines[2] == " 0 | 1  .  S"
    assert lines[4] == " 2 | S  S  S"


def test_probability_grid_uses_nan_for_revealed(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)
    facade.add_squares([(0, 0)])

    grid = probability_grid(facade)

    assert grid.shape == (3, 3)
    assert math.isnan(grid[0, 0])
    assert np.isclose(grid[1, 1], 1 / 3)
    assert np.isclose(grid[2, 2], 0.0)


def test_heatmap_draws_on_given_axes():
    facade = _flagged_pair()
    fig, ax = plt.subplots()

    returned = plot_probability_heatmap(facade, ax=ax)

    assert returned is ax
    assert [t.get_text() for t in ax.texts] == ["F"]
    plt.close(fig)


def test_summarize_forest_counts_nodes(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)
    facade.add_squares([(0, 0)])
    facade.add_squares([(1, 0)])

    stats = summarize_forest(facade.manager)

    assert stats["chains"] == 5.0
    assert stats["leaves"] == 2.0
    assert stats["max_depth"] == 2.0
    assert stats["mean_leaf_mines"] == 1.0
    assert stats["revealed"] == 2.0
    assert stats["unused"] == 3.0
