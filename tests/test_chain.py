from conftest import clues_from_layout

from minechain.board import Board
from minechain.chain import Chain


def _revealed_board(layout, cells, budget):
    board = Board(clues_from_layout(layout), mine_budget=budget)
    for cell in cells:
        board.reveal(cell)
    return board


def test_root_is_an_empty_leaf():
    root = Chain.root(3)
    assert root.is_root
    assert root.is_leaf
    assert root.parent is None
    assert root.mines == root.safes == root.new_mines == frozenset()
    assert root.recount_leaves() == 1


def test_extend_branches_over_every_choice(center_mine_clues):
    board = Board(center_mine_clues, mine_budget=1)
    board.reveal((0, 0))
    root = Chain.root(1)

    children = root.extend(board, [(0, 0)])

    assert len(children) == 3
    assert root.children == children
    assert {next(iter(c.new_mines)) for c in children} == {(1, 0), (0, 1), (1, 1)}
    for child in children:
        assert child.parent is root
        assert child.mines == child.new_mines
        assert len(child.safes) == 2
        assert not child.mines & child.safes
    assert root.recount_leaves() == 3


def test_extend_respects_mine_budget():
    board = _revealed_board(["*.*"], [(1, 0)], budget=1)
    root = Chain.root(1)

    assert root.extend(board, [(1, 0)]) == []
    assert root.is_leaf


def test_extend_prunes_when_clue_is_already_exceeded():
    board = _revealed_board(["*.*"], [(1, 0)], budget=2)
    root = Chain.root(2)
    (child,) = root.extend(board, [(1, 0)])
    assert child.mines == {(0, 0), (2, 0)}

    # A chain claiming both neighbours of a "1" are mines has no extension.
    other = _revealed_board([".*.", "..."], [(0, 1)], budget=2)
    liar = Chain(frozenset({(0, 0), (1, 0)}), frozenset(), frozenset(), 2)
    assert liar.extend(other, [(0, 1)]) == []


def test_extend_folds_clues_of_one_batch(corner_mine_clues):
    safe_cells = [(x, y) for y in range(3) for x in range(3) if (x, y) != (2, 2)]
    board = Board(corner_mine_clues, mine_budget=1)
    for cell in safe_cells:
        board.reveal(cell)
    root = Chain.root(1)

    children = root.extend(board, safe_cells)

    assert len(children) == 1
    assert children[0].mines == {(2, 2)}
    assert children[0].new_mines == {(2, 2)}


def test_extend_skips_cells_without_numeric_clue():
    board = Board([[None, "M"]], mine_budget=1)
    board.reveal((0, 0))
    root = Chain.root(1)

    (child,) = root.extend(board, [(0, 0)])

    assert child.mines == frozenset()
    assert child.safes == frozenset()


def test_leaf_count_sums_children():
    root = Chain.root(5)
    a = Chain(frozenset(), frozenset(), frozenset(), 5, parent=root)
    b = Chain(frozenset(), frozenset(), frozenset(), 5, parent=root)
    root.add_child(a)
    root.add_child(b)
    for _ in range(3):
        a.add_child(Chain(frozenset(), frozenset(), frozenset(), 5, parent=a))

    assert root.recount_leaves() == 4
    assert a.leaf_count == 3
    assert b.leaf_count == 1
    assert len(list(root.iter_leaves())) == 4


def test_deep_forest_does_not_recurse():
    root = Chain.root(0)
    node = root
    for _ in range(5000):
        child = Chain(frozenset(), frozenset(), frozenset(), 0, parent=node)
        node.add_child(child)
        node = child

    assert root.recount_leaves() == 1
    assert list(root.iter_leaves()) == [node]
    assert node.depth() == 5000
