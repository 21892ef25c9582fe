"""
Wave Function Collapse solver driver with progress signals.
"""

import random
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, Tuple, Union

from PySide6.QtCore import QObject, Signal

from ..logging_config import get_logger, log_backtrack, log_step
from .collapser import collapse_cell, select_cell
from .errors import (
    ConfigurationError, ContradictionError, ExhaustedError,
    InvalidDimensionsError, InvalidRuleError, OutOfRangeError, UninitializedError
)
from .propagator import Propagator
from .settings import SolverSettings
from .tile import Ruleset
from .validation import find_violations
from .wave import Wave, WaveMark, grid_neighbors

logger = get_logger(__name__)


class SolverState(Enum):
    """Solver states."""
    UNINITIALIZED = auto()
    READY = auto()
    RUNNING = auto()
    SOLVED = auto()
    CONTRADICTED = auto()
    EXHAUSTED = auto()


class SolveStatus(Enum):
    """Terminal outcome of a run."""
    SOLVED = "solved"
    CONTRADICTED = "contradicted"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class SolveResult:
    """Outcome of WaveFunctionCollapse2D.run()."""
    status: SolveStatus
    grid: Optional[Tuple[int, ...]] = None  # set when solved
    index: Optional[int] = None             # contradicted cell
    iterations: int = 0
    backtracks: int = 0

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    def unwrap(self) -> Tuple[int, ...]:
        """
        Return the solved grid.

        Raises:
            ContradictionError: If the run ended in a contradiction
            ExhaustedError: If the run ran out of budget
        """
        if self.status is SolveStatus.CONTRADICTED:
            raise ContradictionError(self.index)
        if self.status is SolveStatus.EXHAUSTED:
            raise ExhaustedError(self.iterations)
        return self.grid


class WaveFunctionCollapse2D(QObject):
    """
    Wave Function Collapse over a rows x cols grid.

    Holds the immutable ruleset of the current run and exclusively owns
    the wave it mutates. Each run() starts from a fresh wave.

    Signals:
        cell_collapsed(index, tile_id): Emitted when a cell resolves to one tile
        contradiction_found(index): Emitted when a cell runs out of options
        backtracked(index): Emitted when a checkpoint for a cell is rolled back
        state_changed(state): Emitted when solver state changes
        finished(success): Emitted when a run ends
        progress_updated(collapsed, total): Emitted on progress change
    """

    cell_collapsed = Signal(int, int)
    contradiction_found = Signal(int)
    backtracked = Signal(int)
    state_changed = Signal(SolverState)
    finished = Signal(bool)
    progress_updated = Signal(int, int)

    def __init__(self, settings: Optional[SolverSettings] = None, parent=None):
        super().__init__(parent)

        self.settings = settings or SolverSettings()
        self.ruleset: Optional[Ruleset] = None
        self.rows: int = 0
        self.cols: int = 0

        self._state = SolverState.UNINITIALIZED
        self._initialized = False
        self._wave: Optional[Wave] = None
        self._output: List[Optional[int]] = []
        self._locked: Dict[int, int] = {}
        self._propagator = Propagator()

        self._iterations = 0
        self._backtracks = 0
        self._collapsed_count = 0
        self._checkpoints: List[Tuple[WaveMark, int, int]] = []

    @property
    def state(self) -> SolverState:
        return self._state

    @state.setter
    def state(self, value: SolverState):
        if self._state != value:
            self._state = value
            self.state_changed.emit(value)

    @property
    def wave(self) -> Optional[Wave]:
        """Wave of the last run, kept for inspection."""
        return self._wave

    def initialize(self, rows: int, cols: int):
        """
        Size the output grid. Clears locked cells and any previous result.

        Raises:
            InvalidDimensionsError: If the grid would have no cells
        """
        if rows <= 0 or cols <= 0:
            raise InvalidDimensionsError(f"Grid must have at least one cell, got {rows}x{cols}")

        self.rows = rows
        self.cols = cols
        self._output = [None] * (rows * cols)
        self._wave = None
        self._locked.clear()
        self._initialized = True
        self.state = SolverState.READY

    def is_initialized(self) -> bool:
        return self._initialized

    def size(self) -> int:
        return len(self._output)

    def at(self, index: int) -> Optional[int]:
        """
        Tile id at `index` of the output grid (None if unresolved).

        Raises:
            OutOfRangeError: If index is outside the grid
        """
        if not 0 <= index < len(self._output):
            raise OutOfRangeError(f"Index {index} outside grid of {len(self._output)} cells")
        return self._output[index]

    def __getitem__(self, index: int) -> Optional[int]:
        # No bounds check
        return self._output[index]

    def __iter__(self) -> Iterator[Optional[int]]:
        return iter(self._output)

    def neighbors(self, index: int) -> List[int]:
        """Neighbor indices in Up, Down, Left, Right order, off-grid omitted."""
        self._require_initialized()
        if not 0 <= index < len(self._output):
            raise OutOfRangeError(f"Index {index} outside grid of {len(self._output)} cells")
        return [n for n, _ in grid_neighbors(index, self.cols, self.rows)]

    def lock_cell(self, index: int, tile_id: int):
        """Pin a cell to a specific tile for the following runs."""
        self._require_initialized()
        if not 0 <= index < len(self._output):
            raise OutOfRangeError(f"Index {index} outside grid of {len(self._output)} cells")
        self._locked[index] = tile_id

    def unlock_cell(self, index: int):
        self._locked.pop(index, None)

    @property
    def locked_cells(self) -> Dict[int, int]:
        return dict(self._locked)

    def run(
        self,
        ruleset: Ruleset,
        seed: Union[int, random.Random, None] = None,
        max_iterations: Optional[int] = None
    ) -> SolveResult:
        """
        Solve the grid.

        Args:
            ruleset: Tiles and adjacency rules
            seed: Seed or random.Random instance driving every random choice
            max_iterations: Collapse steps before giving up (None = settings value)

        Returns:
            SolveResult with the solved grid, the contradicted cell index,
            or an exhausted marker

        Raises:
            UninitializedError: If initialize() was not called
            ConfigurationError: If the ruleset or a locked cell is invalid
        """
        self._require_initialized()
        if not isinstance(ruleset, Ruleset):
            raise ConfigurationError(f"Expected a Ruleset, got {type(ruleset).__name__}")
        for index, tile_id in self._locked.items():
            if not 0 <= tile_id < ruleset.tile_count():
                raise InvalidRuleError(f"Cell {index} is locked to unknown tile {tile_id}")

        rng = seed if isinstance(seed, random.Random) else random.Random(seed)
        if max_iterations is None:
            max_iterations = self.settings.max_iterations
        deadline = None
        if self.settings.time_limit is not None:
            deadline = time.monotonic() + self.settings.time_limit

        self.ruleset = ruleset
        self._wave = Wave()
        self._wave.initialize(ruleset, self.rows, self.cols)
        self._output = [None] * len(self._wave)
        self._iterations = 0
        self._backtracks = 0
        self._collapsed_count = self._wave.collapsed_count()
        self._checkpoints = []

        logger.info(
            f"Solving {self.rows}x{self.cols} grid with {ruleset.tile_count()} tiles "
            f"(heuristic={self.settings.heuristic.value}, backtracking={self.settings.backtracking})"
        )
        self.state = SolverState.RUNNING
        self.progress_updated.emit(self._collapsed_count, self.size())

        if not self._apply_initial_constraints():
            return self._finish_contradicted()

        while True:
            if self._wave.is_fully_collapsed():
                return self._finish_solved()
            if max_iterations is not None and self._iterations >= max_iterations:
                return self._finish_exhausted()
            if deadline is not None and time.monotonic() >= deadline:
                return self._finish_exhausted()
            if not self._step(rng):
                if self._wave.is_contradicted:
                    return self._finish_contradicted()
                return self._finish_solved()

    def validate_grid(self) -> List[str]:
        """
        Validate all adjacencies in the current output grid.
        Returns list of error messages (empty if valid).
        """
        if self.ruleset is None:
            return ["No ruleset loaded"]
        return find_violations(self.ruleset, self._output, self.cols)

    def _apply_initial_constraints(self) -> bool:
        """Apply locked cells, then propagate. False on contradiction."""
        wave = self._wave
        for index, tile_id in sorted(self._locked.items()):
            wave.restrict(index, (tile_id,))

        if self.settings.initial_propagation:
            seeds = range(len(wave))
        else:
            # Cells that start out single-tile constrain their neighbors too
            seeds = sorted(wave.changed | {c.index for c in wave.cells if c.collapsed})
        consistent = self._propagator.propagate(wave, seeds)
        self._report_changes()
        return consistent

    def _step(self, rng: random.Random) -> bool:
        """
        Perform one select/collapse/propagate iteration.

        Returns False when there is nothing left to do: either no cell
        can be selected or a contradiction could not be backtracked.
        """
        wave = self._wave
        index = select_cell(wave, self.settings.heuristic)
        if index is None:
            return False

        mark = wave.checkpoint() if self.settings.backtracking else None
        entropy = wave.cells[index].entropy
        tile_id = collapse_cell(wave, index, rng, self.ruleset)
        self._iterations += 1
        log_step(logger, self._iterations, index, tile_id, entropy)

        if mark is not None:
            self._checkpoints.append((mark, index, tile_id))

        consistent = self._propagator.propagate(wave, [index])
        while not consistent:
            banned_index = self._backtrack()
            if banned_index is None:
                return False
            consistent = self._propagator.propagate(wave, [banned_index])

        self._report_changes()
        return True

    def _backtrack(self) -> Optional[int]:
        """
        Roll back to the latest checkpoint and ban the tile chosen there.

        Returns the index of the rolled-back cell, or None when backtracking
        is off or out of checkpoints or budget.
        """
        if not self.settings.backtracking or not self._checkpoints:
            return None
        if self._backtracks >= self.settings.max_backtracks:
            logger.warning(f"Backtrack limit of {self.settings.max_backtracks} reached")
            return None

        mark, index, tile_id = self._checkpoints.pop()
        self._wave.restore(mark)
        self._wave.ban(index, tile_id)
        self._backtracks += 1
        self._collapsed_count = self._wave.collapsed_count()

        log_backtrack(logger, len(self._checkpoints), index, tile_id)
        self.backtracked.emit(index)
        self.progress_updated.emit(self._collapsed_count, self.size())
        return index

    def _report_changes(self):
        """Emit cell_collapsed for every cell that resolved since last report."""
        wave = self._wave
        newly_collapsed = 0
        for index in sorted(wave.drain_changed()):
            cell = wave.cells[index]
            if cell.collapsed:
                newly_collapsed += 1
                self.cell_collapsed.emit(index, cell.tile)
        if newly_collapsed:
            self._collapsed_count += newly_collapsed
            self.progress_updated.emit(self._collapsed_count, self.size())

    def _finish_solved(self) -> SolveResult:
        self._output = self._wave.output_grid()
        self.state = SolverState.SOLVED
        logger.info(f"Solved after {self._iterations} iterations, {self._backtracks} backtracks")
        self.finished.emit(True)
        return SolveResult(
            status=SolveStatus.SOLVED,
            grid=tuple(self._output),
            iterations=self._iterations,
            backtracks=self._backtracks
        )

    def _finish_contradicted(self) -> SolveResult:
        index = self._wave.contradiction
        self._output = self._wave.output_grid()
        self.state = SolverState.CONTRADICTED
        logger.warning(f"Contradiction at cell {index} after {self._iterations} iterations")
        self.contradiction_found.emit(index)
        self.finished.emit(False)
        return SolveResult(
            status=SolveStatus.CONTRADICTED,
            index=index,
            iterations=self._iterations,
            backtracks=self._backtracks
        )

    def _finish_exhausted(self) -> SolveResult:
        self._output = self._wave.output_grid()
        self.state = SolverState.EXHAUSTED
        logger.warning(f"Gave up after {self._iterations} iterations")
        self.finished.emit(False)
        return SolveResult(
            status=SolveStatus.EXHAUSTED,
            iterations=self._iterations,
            backtracks=self._backtracks
        )

    def _require_initialized(self):
        if not self._initialized:
            raise UninitializedError("WaveFunctionCollapse2D not initialized")
