"""
Mutable per-cell state of a WFC run.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from .errors import InvalidDimensionsError, OutOfRangeError
from .tile import DIRECTIONS, Direction, Ruleset


@dataclass
class Cell:
    """Superposition of a single grid cell."""
    index: int
    possibilities: FrozenSet[int] = field(default_factory=frozenset)
    entropy: int = 0  # remaining possibilities, lower = more constrained
    collapsed: bool = False

    def set_possibilities(self, possibilities: FrozenSet[int]):
        self.possibilities = possibilities
        self.entropy = len(possibilities)
        self.collapsed = self.entropy == 1

    @property
    def tile(self) -> Optional[int]:
        """The single remaining tile id, or None while unresolved."""
        if self.collapsed:
            return next(iter(self.possibilities))
        return None


# (trail length, contradiction) at the time of checkpoint()
WaveMark = Tuple[int, Optional[int]]


def grid_neighbors(index: int, width: int, height: int) -> List[Tuple[int, Direction]]:
    """Neighbor (index, direction) pairs in Up, Down, Left, Right order."""
    row, col = divmod(index, width)
    result = []
    for direction in DIRECTIONS:
        d_row, d_col = direction.offset
        n_row, n_col = row + d_row, col + d_col
        if 0 <= n_row < height and 0 <= n_col < width:
            result.append((n_row * width + n_col, direction))
    return result


class Wave:
    """
    Grid of cells, row-major, `height` rows by `width` columns.

    The wave is terminal once every cell is collapsed (success) or any
    cell's possibility set is empty (contradiction).
    """

    def __init__(self):
        self.ruleset: Optional[Ruleset] = None
        self.width: int = 0
        self.height: int = 0
        self.cells: List[Cell] = []
        self.contradiction: Optional[int] = None
        self.changed: Set[int] = set()
        self._neighbor_table: List[List[Tuple[int, Direction]]] = []
        self._trail: List[Tuple[int, FrozenSet[int]]] = []
        self._recording = False

    def initialize(self, ruleset: Ruleset, rows: int, cols: int):
        """
        Reset every cell to the full tile range of `ruleset`.

        Raises:
            InvalidDimensionsError: If the grid would have no cells
        """
        if rows <= 0 or cols <= 0:
            raise InvalidDimensionsError(f"Grid must have at least one cell, got {rows}x{cols}")

        self.ruleset = ruleset
        self.height = rows
        self.width = cols
        self.contradiction = None
        self.changed.clear()
        self._trail.clear()
        self._recording = False

        self._neighbor_table = [grid_neighbors(i, cols, rows) for i in range(rows * cols)]

        full = ruleset.all_ids
        self.cells = []
        for index in range(rows * cols):
            cell = Cell(index=index)
            cell.set_possibilities(full)
            self.cells.append(cell)

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def is_contradicted(self) -> bool:
        return self.contradiction is not None

    def cell(self, index: int) -> Cell:
        """Get a cell, bounds-checked."""
        if not 0 <= index < len(self.cells):
            raise OutOfRangeError(f"Cell index {index} outside grid of {len(self.cells)} cells")
        return self.cells[index]

    def neighbors(self, index: int) -> List[Tuple[int, Direction]]:
        """Neighbor (index, direction) pairs in Up, Down, Left, Right order."""
        return self._neighbor_table[index]

    def neighbor_indices(self, index: int) -> List[int]:
        return [n for n, _ in self.neighbors(index)]

    def restrict(self, index: int, allowed: Iterable[int]) -> bool:
        """
        Intersect a cell's possibilities with `allowed`.

        Returns True if the cell lost at least one possibility. An empty
        result records the contradiction at `index`.
        """
        cell = self.cells[index]
        narrowed = cell.possibilities.intersection(allowed)
        if len(narrowed) == cell.entropy:
            return False

        self._assign(cell, narrowed)
        if not narrowed and self.contradiction is None:
            self.contradiction = index
        return True

    def collapse(self, index: int, tile_id: int):
        """Fix a cell to a single tile."""
        cell = self.cells[index]
        if cell.possibilities != {tile_id}:
            self._assign(cell, frozenset((tile_id,)))

    def ban(self, index: int, tile_id: int) -> bool:
        """Remove one tile from a cell's possibilities."""
        return self.restrict(index, self.cells[index].possibilities - {tile_id})

    def drain_changed(self) -> Set[int]:
        """Return and clear the set of cells changed since the last drain."""
        changed = self.changed
        self.changed = set()
        return changed

    def is_fully_collapsed(self) -> bool:
        return self.contradiction is None and all(c.collapsed for c in self.cells)

    def collapsed_count(self) -> int:
        return sum(1 for c in self.cells if c.collapsed)

    def total_possibilities(self) -> int:
        return sum(c.entropy for c in self.cells)

    def checkpoint(self) -> WaveMark:
        """
        Mark the current state for a later restore().

        From the first checkpoint on, every change records the previous
        possibility set of its cell, so a mark is just a position in that
        undo trail. Marks must be restored newest first.
        """
        self._recording = True
        return len(self._trail), self.contradiction

    def restore(self, mark: WaveMark):
        """Undo every change made since `mark` was taken."""
        length, contradiction = mark
        while len(self._trail) > length:
            index, previous = self._trail.pop()
            self.cells[index].set_possibilities(previous)
        self.contradiction = contradiction
        self.changed.clear()

    @property
    def trail_size(self) -> int:
        """Number of undo entries held for open checkpoints."""
        return len(self._trail)

    def _assign(self, cell: Cell, possibilities: FrozenSet[int]):
        if self._recording:
            self._trail.append((cell.index, cell.possibilities))
        cell.set_possibilities(possibilities)
        self.changed.add(cell.index)

    def output_grid(self) -> List[Optional[int]]:
        """Tile id per cell, None for unresolved cells."""
        return [c.tile for c in self.cells]
