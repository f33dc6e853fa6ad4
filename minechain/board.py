"""Grid model: clue storage, adjacency bookkeeping and the reveal fingerprint."""

import logging
from typing import Dict, Iterable, Iterator, List, Sequence, Set, Tuple, Union

from .config import FINGERPRINT_WORD_BITS, MINE, Clue, is_numbered, parse_clue
from .utils import Cell, get_neighborhoods

logger = logging.getLogger(__name__)


class Fingerprint:
    """
    Monotonically growing bit-vector of revealed cells.

    Cell index i (row-major, y * width + x) lives in bit i % word_bits of
    word i // word_bits. Bits are only ever set.
    """

    def __init__(self, size: int, word_bits: int = FINGERPRINT_WORD_BITS) -> None:
        if size < 0:
            raise ValueError("size must be non-negative.")
        if word_bits <= 0:
            raise ValueError("word_bits must be positive.")
        self.size: int = size
        self.word_bits: int = word_bits
        self.words: List[int] = [0] * (-(-size // word_bits))

    def mark(self, index: int) -> None:
        """Set the bit for a flattened cell index."""
        if not 0 <= index < self.size:
            raise IndexError(f"Fingerprint index {index} out of range.")
        word, bit = divmod(index, self.word_bits)
        self.words[word] |= 1 << bit

    def is_marked(self, index: int) -> bool:
        word, bit = divmod(index, self.word_bits)
        return bool(self.words[word] >> bit & 1)

    def snapshot(self) -> Tuple[int, ...]:
        """Return an immutable copy of the words, suitable for a message."""
        return tuple(self.words)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Fingerprint):
            other_words: Sequence[int] = other.words
        elif isinstance(other, (list, tuple)):
            other_words = other
        else:
            return NotImplemented
        return len(self.words) == len(other_words) and all(
            a == b for a, b in zip(self.words, other_words)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Fingerprint(size={self.size}, words={self.words!r})"


class Board:
    """
    Clue grid with per-cell hidden-neighbor sets.

    The engine is seeded with the true clue of every cell but only acts on
    clues of cells the host has revealed.
    """

    def __init__(
        self,
        clues: Sequence[Sequence[object]],
        *,
        mine_budget: int,
    ) -> None:
        """
        Build the grid model from a host clue grid.

        Args:
            clues: Rows of clue values, indexed clues[y][x]. Values are parsed
                with config.parse_clue.
            mine_budget: Upper bound on mines across the whole board.

        Raises:
            ValueError: If the grid is empty or ragged, a clue is invalid,
                or mine_budget is negative.
        """
        if not clues or not clues[0]:
            raise ValueError("Clue grid must have at least one row and one column.")
        width = len(clues[0])
        if any(len(row) != width for row in clues):
            raise ValueError("Clue grid rows must all have the same length.")
        if mine_budget < 0:
            raise ValueError("mine_budget must be non-negative.")

        self.width: int = width
        self.height: int = len(clues)
        self.mine_budget: int = mine_budget

        self.clues: Dict[Cell, Clue] = {
            (x, y): parse_clue(clues[y][x])
            for y in range(self.height)
            for x in range(self.width)
        }

        # Adjacency addressed by coordinate keys; no cell objects reference each other.
        self.neighbors: Dict[Cell, Tuple[Cell, ...]] = get_neighborhoods(
            self.width, self.height
        )
        self.hidden: Dict[Cell, Set[Cell]] = {
            cell: set(nbrs) for cell, nbrs in self.neighbors.items()
        }
        self.revealed: Set[Cell] = set()
        self.fingerprint: Fingerprint = Fingerprint(self.width * self.height)

    def cells(self) -> Iterator[Cell]:
        """Iterate every coordinate in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def in_bounds(self, cell: object) -> bool:
        if not isinstance(cell, (tuple, list)) or len(cell) != 2:
            return False
        x, y = cell
        if not isinstance(x, int) or not isinstance(y, int):
            return False
        if isinstance(x, bool) or isinstance(y, bool):
            return False
        return 0 <= x < self.width and 0 <= y < self.height

    def flatten(self, cell: Cell) -> int:
        x, y = cell
        return y * self.width + x

    def clue(self, cell: Cell) -> Clue:
        return self.clues[cell]

    def is_numbered(self, cell: Cell) -> bool:
        return is_numbered(self.clues[cell])

    def is_revealed(self, cell: Cell) -> bool:
        return self.fingerprint.is_marked(self.flatten(cell))

    def hidden_neighbors(self, cell: Cell) -> List[Cell]:
        """Return the still-hidden neighbors of a cell in stable row-major order."""
        hidden = self.hidden[cell]
        return [n for n in self.neighbors[cell] if n in hidden]

    def reveal(self, cell: Cell) -> bool:
        """
        Mark a cell as revealed and drop it from its neighbors' hidden sets.

        Returns:
            True if the cell was newly revealed, False if it already was.
        """
        if cell in self.revealed:
            return False
        self.revealed.add(cell)
        for nbr in self.neighbors[cell]:
            self.hidden[nbr].discard(cell)
        self.fingerprint.mark(self.flatten(cell))
        return True

    def normalize_batch(
        self, cells: Iterable[Union[Cell, Sequence[int]]]
    ) -> List[Cell]:
        """
        Filter a host reveal batch down to new, in-bounds, non-mine cells.

        Duplicates are dropped keeping first occurrence order. Nothing here
        raises: host-side mistakes are logged and ignored.
        """
        batch: List[Cell] = []
        seen: Set[Cell] = set()
        for raw in cells:
            if not self.in_bounds(raw):
                logger.warning("Ignoring out-of-bounds reveal %r", raw)
                continue
            cell: Cell = (int(raw[0]), int(raw[1]))
            if cell in seen:
                continue
            seen.add(cell)
            if self.is_revealed(cell):
                logger.debug("Ignoring already revealed cell %r", cell)
                continue
            if self.clues[cell] == MINE:
                logger.warning("Ignoring reveal of mine cell %r", cell)
                continue
            batch.append(cell)
        return batch

