"""Probability facade: the latest safe/flag/lowest sets and the queries over them."""

import enum
import logging
from typing import FrozenSet, Iterable, List, Sequence, Tuple, Union

from .board import Board, Fingerprint
from .manager import ChainManager, Classification
from .utils import Cell

logger = logging.getLogger(__name__)


class RequestKind(str, enum.Enum):
    """Which classification set a host is asking for."""

    SAFES = "safes"
    FLAGS = "flags"
    LOWEST = "lowest"


class ProbabilityFacade:
    """Per-game entry point holding the most recent classification."""

    def __init__(self, clues: Sequence[Sequence[object]], mine_budget: int) -> None:
        """
        Seed a new game.

        Args:
            clues: Full clue grid, rows indexed clues[y][x].
            mine_budget: Total number of mines on the board.
        """
        self.board: Board = Board(clues, mine_budget=mine_budget)
        self.manager: ChainManager = ChainManager(self.board)
        self.classification: Classification = Classification()
        logger.info(
            "New game %dx%d with %d mines",
            self.board.width,
            self.board.height,
            mine_budget,
        )

    @property
    def safe(self) -> FrozenSet[Cell]:
        return self.classification.safe

    @property
    def flag(self) -> FrozenSet[Cell]:
        return self.classification.flag

    @property
    def lowest(self) -> FrozenSet[Cell]:
        return self.classification.lowest

    @property
    def fingerprint(self) -> Fingerprint:
        return self.board.fingerprint

    def add_squares(self, cells: Iterable[Cell]) -> bool:
        """
        Feed newly revealed cells to the engine.

        Returns:
            True if the batch contained new cells and the sets were recomputed.
        """
        batch = self.board.normalize_batch(cells)
        if not batch:
            return False
        # Board.reveal (run by the manager) advances the fingerprint per cell.
        self.classification = self.manager.reveal(batch)
        return True

    def fulfill_request(
        self, kind: Union[RequestKind, str]
    ) -> Tuple[List[Cell], Tuple[int, ...]]:
        """
        Answer a host request from the current sets without recomputing.

        Args:
            kind: RequestKind or its string value ("safes", "flags", "lowest").

        Returns:
            Tuple of (sorted cells, fingerprint words).

        Raises:
            ValueError: If kind is not a known request kind.
        """
        kind = RequestKind(kind)
        if kind is RequestKind.SAFES:
            cells = self.safe
        elif kind is RequestKind.FLAGS:
            cells = self.flag
        else:
            cells = self.lowest
        return sorted(cells), self.fingerprint.snapshot()
