"""
Cell selection and collapse.
"""

import math
import random
from enum import Enum
from typing import Optional

from .errors import NoPossibilitiesError
from .tile import Ruleset
from .wave import Wave


class Heuristic(Enum):
    """How the next cell to collapse is chosen."""
    ENTROPY = "entropy"    # fewest remaining possibilities
    SHANNON = "shannon"    # lowest weighted Shannon entropy
    SCANLINE = "scanline"  # first uncollapsed cell in row-major order


def select_cell(wave: Wave, heuristic: Heuristic = Heuristic.ENTROPY) -> Optional[int]:
    """
    Find the next cell to collapse.

    Ties are broken by the lowest index so a fixed seed always replays
    the same solve. Returns None when every cell is collapsed.
    """
    if heuristic is Heuristic.SCANLINE:
        for cell in wave.cells:
            if not cell.collapsed:
                return cell.index
        return None

    if heuristic is Heuristic.SHANNON:
        def score(cell):
            return shannon_entropy(wave.ruleset, cell.possibilities)
    else:
        def score(cell):
            return cell.entropy

    best_index = None
    best_score = math.inf
    for cell in wave.cells:
        if cell.collapsed:
            continue
        value = score(cell)
        # Strict comparison keeps the lowest index on ties
        if value < best_score:
            best_score = value
            best_index = cell.index
    return best_index


def shannon_entropy(ruleset: Ruleset, possibilities) -> float:
    """Weighted Shannon entropy of a possibility set."""
    weights = [ruleset.weight(t) for t in possibilities]
    total = sum(weights)
    if total <= 0:
        return 0.0
    return math.log(total) - sum(w * math.log(w) for w in weights) / total


def collapse_cell(
    wave: Wave,
    index: int,
    rng: random.Random,
    ruleset: Optional[Ruleset] = None
) -> int:
    """
    Fix a cell to one of its remaining tiles.

    The draw is weighted by tile weight (uniform when weights are equal)
    and always iterates candidates in sorted order so the result depends
    only on the rng state.

    Returns:
        The chosen tile id

    Raises:
        NoPossibilitiesError: If the cell has nothing left to choose from
    """
    cell = wave.cells[index]
    if not cell.possibilities:
        raise NoPossibilitiesError(f"Cell {index} has no possibilities to choose from")

    ruleset = ruleset or wave.ruleset
    candidates = sorted(cell.possibilities)
    if len(candidates) == 1:
        tile_id = candidates[0]
    else:
        weights = [ruleset.weight(t) for t in candidates]
        tile_id = rng.choices(candidates, weights=weights, k=1)[0]

    wave.collapse(index, tile_id)
    return tile_id
