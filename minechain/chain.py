"""Constraint chains: nodes of the forest of consistent mine placements."""

import weakref
from typing import FrozenSet, Iterator, List, Optional, Sequence, Tuple

from .board import Board
from .utils import Cell, split_combinations

# (cumulative mines, cumulative safes, mines chosen during this batch)
Partial = Tuple[FrozenSet[Cell], FrozenSet[Cell], FrozenSet[Cell]]


class Chain:
    """
    One consistent partial mine assignment.

    A chain owns its children; the parent link is a weak reference so that
    a detached subtree is freed as soon as nothing else holds it. Every leaf
    below a node is one complete placement for the cells processed so far,
    and leaf_count is the number of such placements.
    """

    __slots__ = (
        "mines",
        "new_mines",
        "safes",
        "max_mines",
        "children",
        "leaf_count",
        "_parent",
        "__weakref__",
    )

    def __init__(
        self,
        mines: FrozenSet[Cell],
        new_mines: FrozenSet[Cell],
        safes: FrozenSet[Cell],
        max_mines: int,
        parent: Optional["Chain"] = None,
    ) -> None:
        self.mines: FrozenSet[Cell] = mines
        self.new_mines: FrozenSet[Cell] = new_mines
        self.safes: FrozenSet[Cell] = safes
        self.max_mines: int = max_mines
        self.children: List["Chain"] = []
        self.leaf_count: int = 1
        self._parent: Optional["weakref.ReferenceType[Chain]"] = (
            weakref.ref(parent) if parent is not None else None
        )

    @classmethod
    def root(cls, max_mines: int) -> "Chain":
        """Build the 'no information yet' root."""
        return cls(frozenset(), frozenset(), frozenset(), max_mines)

    @property
    def parent(self) -> Optional["Chain"]:
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add_child(self, child: "Chain") -> None:
        self.children.append(child)

    def remove_child(self, child: "Chain") -> None:
        self.children.remove(child)

    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def iter_subtree(self) -> Iterator["Chain"]:
        """Yield this chain and all its descendants (pre-order, no recursion)."""
        stack: List[Chain] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_leaves(self) -> Iterator["Chain"]:
        """Yield the terminal descendants of this chain."""
        for node in self.iter_subtree():
            if not node.children:
                yield node

    def recount_leaves(self) -> int:
        """
        Recompute leaf_count bottom-up for this subtree.

        Returns:
            The refreshed leaf count of this chain.
        """
        order = list(self.iter_subtree())
        for node in reversed(order):
            if node.children:
                node.leaf_count = sum(child.leaf_count for child in node.children)
            else:
                node.leaf_count = 1
        return self.leaf_count

    # -------------------------------------------------------------------------
    # Extension
    # -------------------------------------------------------------------------

    def extend(self, board: Board, batch: Sequence[Cell]) -> List["Chain"]:
        """
        Build the children that extend this chain across a revealed batch.

        Each numbered cell of the batch is applied in turn to every partial
        assignment produced by the cells before it. For a clue cell with
        value v, the cell's hidden neighbors that this partial has not yet
        classified receive exactly v minus (hidden neighbors already mines)
        new mines, in every possible way.

        Args:
            board: Grid model, already updated with the batch's reveals.
            batch: Newly revealed cells. Cells without a numeric clue add
                no constraint.

        Returns:
            The new children, already attached. An empty list means no
            consistent extension exists and this chain should be pruned.
        """
        partials: List[Partial] = [(self.mines, self.safes, frozenset())]

        for cell in batch:
            if not board.is_numbered(cell):
                continue
            clue = board.clue(cell)
            hidden = board.hidden_neighbors(cell)

            refined: List[Partial] = []
            for mines, safes, chosen_so_far in partials:
                available = [n for n in hidden if n not in mines and n not in safes]
                adjacent_mines = sum(1 for n in hidden if n in mines)
                needed = clue - adjacent_mines  # type: ignore[operator]
                if needed < 0 or len(mines) + needed > self.max_mines:
                    continue
                splits = split_combinations(available, needed)
                if splits is None:
                    continue
                for chosen, rest in splits:
                    refined.append(
                        (
                            mines.union(chosen),
                            safes.union(rest),
                            chosen_so_far.union(chosen),
                        )
                    )
            partials = refined
            if not partials:
                break

        children: List[Chain] = []
        for mines, safes, chosen in partials:
            child = Chain(mines, chosen, safes, self.max_mines, parent=self)
            self.add_child(child)
            children.append(child)
        return children

    def __repr__(self) -> str:
        return (
            f"Chain(mines={sorted(self.mines)}, new={sorted(self.new_mines)}, "
            f"leaves={self.leaf_count})"
        )
