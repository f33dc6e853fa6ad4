import pytest

from minechain.board import Board, Fingerprint
from minechain.config import MINE


def test_board_parses_clues(center_mine_clues):
    board = Board(center_mine_clues, mine_budget=1)

    assert (board.width, board.height) == (3, 3)
    assert board.clue((1, 1)) == MINE
    assert board.clue((0, 0)) == 1
    assert board.is_numbered((0, 0))
    assert not board.is_numbered((1, 1))


@pytest.mark.parametrize("clues", [[], [[]], [[1, 1], [1]]])
def test_board_rejects_malformed_grids(clues):
    with pytest.raises(ValueError):
        Board(clues, mine_budget=0)


def test_board_rejects_negative_budget():
    with pytest.raises(ValueError):
        Board([[0]], mine_budget=-1)


def test_reveal_shrinks_neighbor_hidden_sets(center_mine_clues):
    board = Board(center_mine_clues, mine_budget=1)

    assert board.reveal((0, 0)) is True
    assert board.reveal((0, 0)) is False

    for nbr in board.neighbors[(0, 0)]:
        assert (0, 0) not in board.hidden[nbr]
    assert board.hidden_neighbors((1, 0)) == [(2, 0), (0, 1), (1, 1), (2, 1)]
    assert board.fingerprint.is_marked(0)


def test_normalize_batch_filters_host_mistakes(center_mine_clues):
    board = Board(center_mine_clues, mine_budget=1)
    board.reveal((0, 0))

    batch = board.normalize_batch(
        [(0, 0), (5, 5), (-1, 0), (2, 0), (2, 0), (1, 1), "bad", (0, 2)]
    )

    assert batch == [(2, 0), (0, 2)]


def test_fingerprint_packs_53_cells_per_word():
    fp = Fingerprint(120)
    assert fp.words == [0, 0, 0]

    fp.mark(0)
    fp.mark(52)
    fp.mark(53)
    fp.mark(119)

    assert fp.words[0] == 1 | (1 << 52)
    assert fp.words[1] == 1
    assert fp.words[2] == 1 << (119 - 106)
    assert fp.is_marked(53)
    assert not fp.is_marked(54)


def test_fingerprint_equality():
    a = Fingerprint(60)
    b = Fingerprint(60)
    assert a == b

    a.mark(10)
    assert a != b
    b.mark(10)
    assert a == b
    assert a == list(b.words)
    assert a != Fingerprint(200)
    assert a != a.snapshot()[:1]


def test_fingerprint_rejects_out_of_range():
    with pytest.raises(IndexError):
        Fingerprint(4).mark(4)


def test_boolean_coordinates_are_out_of_bounds(center_mine_clues):
    board = Board(center_mine_clues, mine_budget=1)

    assert not board.in_bounds((True, 0))
    assert not board.in_bounds((0, False))
    assert board.normalize_batch([(True, False), (0, 0)]) == [(0, 0)]


def test_is_revealed_reads_the_fingerprint(center_mine_clues):
    board = Board(center_mine_clues, mine_budget=1)
    board.reveal((2, 1))

    assert board.is_revealed((2, 1))
    assert board.fingerprint.is_marked(5)
    assert not board.is_revealed((1, 2))
