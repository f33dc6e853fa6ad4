"""Chain manager: owns the chain forest and runs the incremental reveal algorithm."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import DefaultDict, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

from .board import Board
from .chain import Chain
from .config import EPSILON
from .errors import InvariantViolation
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """
    Result of one classification pass over the hidden cells.

    weights and probabilities are read-only views.
    """

    safe: FrozenSet[Cell] = frozenset()
    flag: FrozenSet[Cell] = frozenset()
    lowest: FrozenSet[Cell] = frozenset()
    weights: Mapping[Cell, int] = field(default_factory=lambda: MappingProxyType({}))
    probabilities: Mapping[Cell, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    total_chains: int = 0
    unused_density: Optional[float] = None


class ChainManager:
    """
    Maintain every mine placement consistent with the clues revealed so far.

    The forest is extended incrementally: each reveal batch prunes the
    chains the batch contradicts and grows every surviving leaf by the new
    clues. The cell -> chains index lets a cell's weight (number of
    placements in which it is a mine) be read off without walking the forest.
    """

    def __init__(self, board: Board) -> None:
        self.board: Board = board
        self.root: Chain = Chain.root(board.mine_budget)

        # cell -> chains whose new_mines contain the cell
        self.index: DefaultDict[Cell, Set[Chain]] = defaultdict(set)

        self.frontier: Set[Cell] = set()
        self.revealed: Set[Cell] = set()
        self.unused: Set[Cell] = set(board.cells())

        self.last_mean_mines: float = 0.0
        self.classification: Classification = Classification()

    # -------------------------------------------------------------------------
    # Forest maintenance
    # -------------------------------------------------------------------------

    def _unindex_subtree(self, chain: Chain) -> None:
        for node in chain.iter_subtree():
            for cell in node.new_mines:
                chains = self.index.get(cell)
                if chains is None:
                    continue
                chains.discard(node)
                if not chains:
                    del self.index[cell]

    def delete_chain(self, chain: Chain) -> int:
        """
        Remove a chain and collapse any ancestor left without children.

        Returns:
            The number of chains detached from their parents.

        Raises:
            InvariantViolation: If the cascade reaches the root.
        """
        detached = 0
        node = chain
        while True:
            parent = node.parent
            if node.is_root or parent is None:
                raise InvariantViolation(
                    "Every candidate placement was eliminated; the clues are inconsistent."
                )
            parent.remove_child(node)
            self._unindex_subtree(node)
            detached += 1
            if parent.children:
                return detached
            node = parent

    def _index_chain(self, chain: Chain) -> None:
        for cell in chain.new_mines:
            self.index[cell].add(chain)

    def leaves(self) -> List[Chain]:
        return list(self.root.iter_leaves())

    def chain_count(self) -> int:
        return sum(1 for _ in self.root.iter_subtree())

    # -------------------------------------------------------------------------
    # Reveal algorithm
    # -------------------------------------------------------------------------

    def reveal(self, cells: Iterable[Cell]) -> Classification:
        """
        Absorb a batch of newly revealed cells and reclassify the board.

        Args:
            cells: Revealed coordinates. Out-of-bounds, duplicate, already
                revealed and mine cells are ignored.

        Returns:
            The new classification, or the previous one if nothing in the
            batch was new.
        """
        batch = self.board.normalize_batch(cells)
        if not batch:
            return self.classification

        # 1) Drop every chain that claimed a now-revealed cell was a mine.
        pruned = 0
        for cell in batch:
            for chain in list(self.index.get(cell, ())):
                # Already swept out with an ancestor deleted earlier in this loop.
                if chain in self.index.get(cell, ()):
                    pruned += self.delete_chain(chain)

        # 2) Leaf counts after pruning.
        self.root.recount_leaves()

        # 3) Board and frontier bookkeeping.
        for cell in batch:
            self.board.reveal(cell)
            self.frontier.discard(cell)
            self.unused.discard(cell)
            self.revealed.add(cell)
        for cell in batch:
            if not self.board.is_numbered(cell):
                continue
            for nbr in self.board.hidden_neighbors(cell):
                self.frontier.add(nbr)
                self.unused.discard(nbr)

        # 4) Extend every leaf across the batch.
        new_leaves: List[Chain] = []
        for leaf in self.leaves():
            children = leaf.extend(self.board, batch)
            if not children:
                pruned += self.delete_chain(leaf)
                continue
            for child in children:
                self._index_chain(child)
            new_leaves.extend(children)

        # 5) Leaf counts after extension.
        total = self.root.recount_leaves()

        # 6) Mean mines per placement, for the unused-cell density estimate.
        if new_leaves:
            self.last_mean_mines = sum(len(c.mines) for c in new_leaves) / len(
                new_leaves
            )

        logger.debug(
            "Revealed %d cells: %d chains pruned, %d leaves, mean mines %.3f",
            len(batch),
            pruned,
            total,
            self.last_mean_mines,
        )

        # 7) Reclassify.
        self.classification = self.classify()
        return self.classification

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def weight(self, cell: Cell) -> int:
        """Number of leaf placements in which the cell is a mine."""
        return sum(chain.leaf_count for chain in self.index.get(cell, ()))

    def unused_density(self) -> Optional[float]:
        """Average mine density over unused cells, or None if there are none."""
        if not self.unused:
            return None
        return (self.board.mine_budget - self.last_mean_mines) / len(self.unused)

    def classify(self) -> Classification:
        """
        Classify the frontier exactly and the unused cells by density.

        Frontier cells with zero weight are safe and cells present in every
        placement are flags. The lowest set holds the frontier cells of
        minimal mine probability; unused cells join or replace it, or are
        declared safe or flagged, by comparing their average density
        against that minimum.
        """
        total = self.root.leaf_count

        weights: Dict[Cell, int] = {}
        probabilities: Dict[Cell, float] = {}
        safe: Set[Cell] = set()
        flag: Set[Cell] = set()

        for cell in self.frontier:
            w = self.weight(cell)
            weights[cell] = w
            probabilities[cell] = w / total if total else 0.0
            if w == 0:
                safe.add(cell)
            elif total and w == total:
                flag.add(cell)

        lowest: Set[Cell] = set()
        min_probability: Optional[float] = None
        if weights:
            min_weight = min(weights.values())
            lowest = {cell for cell, w in weights.items() if w == min_weight}
            # Only the comparison against the unused density is approximate.
            min_probability = min_weight / total if total else 0.0

        density = self.unused_density()
        if density is not None:
            if min_probability is None:
                lowest = set(self.unused)
            elif abs(density - min_probability) < EPSILON:
                lowest |= self.unused
            elif min_probability > density:
                lowest = set(self.unused)

            if abs(density) < EPSILON:
                safe |= self.unused
            elif abs(density - 1.0) < EPSILON:
                flag |= self.unused

            for cell in self.unused:
                probabilities[cell] = density

        return Classification(
            safe=frozenset(safe),
            flag=frozenset(flag),
            lowest=frozenset(lowest),
            weights=MappingProxyType(weights),
            probabilities=MappingProxyType(probabilities),
            total_chains=total,
            unused_density=density,
        )
