from .errors import (
    WFCError, ConfigurationError, EmptyRulesetError, InvalidRuleError,
    InvalidDimensionsError, UninitializedError, OutOfRangeError,
    NoPossibilitiesError, ContradictionError, ExhaustedError
)
from .tile import Direction, DIRECTIONS, Tile, Ruleset
from .wave import Cell, Wave, grid_neighbors
from .propagator import Propagator
from .collapser import Heuristic, select_cell, collapse_cell, shannon_entropy
from .settings import SolverSettings
from .validation import validate_ruleset, find_violations, RulesetReport
from .rules_loader import RulesLoader
from .grid_io import GridState, CellData, save_grid, load_grid
from .wfc_engine import WaveFunctionCollapse2D, SolverState, SolveStatus, SolveResult

__all__ = [
    'WFCError', 'ConfigurationError', 'EmptyRulesetError', 'InvalidRuleError',
    'InvalidDimensionsError', 'UninitializedError', 'OutOfRangeError',
    'NoPossibilitiesError', 'ContradictionError', 'ExhaustedError',
    'Direction', 'DIRECTIONS', 'Tile', 'Ruleset',
    'Cell', 'Wave', 'grid_neighbors',
    'Propagator',
    'Heuristic', 'select_cell', 'collapse_cell', 'shannon_entropy',
    'SolverSettings',
    'validate_ruleset', 'find_violations', 'RulesetReport',
    'RulesLoader',
    'GridState', 'CellData', 'save_grid', 'load_grid',
    'WaveFunctionCollapse2D', 'SolverState', 'SolveStatus', 'SolveResult'
]
