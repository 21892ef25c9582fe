"""
Exceptions raised by the WFC core.
"""

from typing import Optional


class WFCError(Exception):
    """Base class for all wfc2d errors."""


class ConfigurationError(WFCError):
    """Solver was set up wrongly. Raised before any propagation work."""


class EmptyRulesetError(ConfigurationError):
    """Ruleset has no tiles."""


class InvalidRuleError(ConfigurationError):
    """A tile definition references an unknown tile or is malformed."""


class InvalidDimensionsError(ConfigurationError):
    """Grid has zero (or negative) cells."""


class UninitializedError(ConfigurationError):
    """Solver used before initialize() was called."""


class OutOfRangeError(WFCError, IndexError):
    """Checked accessor got an index outside the grid."""


class NoPossibilitiesError(WFCError):
    """Tried to collapse a cell whose possibility set is empty."""


class ContradictionError(WFCError):
    """A cell ran out of possibilities during a solve."""

    def __init__(self, index: Optional[int], message: Optional[str] = None):
        self.index = index
        super().__init__(message or f"Contradiction at cell {index}")


class ExhaustedError(WFCError):
    """Solve stopped because its iteration or time budget ran out."""

    def __init__(self, iterations: int):
        self.iterations = iterations
        super().__init__(f"Gave up after {iterations} iterations")
