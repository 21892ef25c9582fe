"""
Validation utilities for rulesets and solved grids.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from .tile import DIRECTIONS
from .wave import grid_neighbors

if TYPE_CHECKING:
    from .tile import Ruleset


@dataclass
class TileValidation:
    """Validation result for a single tile."""
    tile_id: int
    missing_sides: List[str] = field(default_factory=list)  # no legal neighbor at all
    one_sided: Dict[str, List[int]] = field(default_factory=dict)  # side -> ids not permitting back

    @property
    def is_valid(self) -> bool:
        return len(self.missing_sides) == 0 and len(self.one_sided) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.one_sided) > 0

    @property
    def has_errors(self) -> bool:
        return len(self.missing_sides) > 0


@dataclass
class RulesetReport:
    """Overall validation result for a ruleset."""
    tile_results: Dict[int, TileValidation] = field(default_factory=dict)
    orphan_tiles: List[int] = field(default_factory=list)  # tiles with no legal neighbor on any side

    @property
    def is_valid(self) -> bool:
        return all(tr.is_valid for tr in self.tile_results.values()) and len(self.orphan_tiles) == 0

    @property
    def error_count(self) -> int:
        count = len(self.orphan_tiles)
        for tr in self.tile_results.values():
            count += len(tr.missing_sides)
        return count

    @property
    def warning_count(self) -> int:
        count = 0
        for tr in self.tile_results.values():
            count += len(tr.one_sided)
        return count

    def get_tiles_with_issues(self) -> List[int]:
        """Get sorted ids of tiles that have any issues."""
        issues = set(self.orphan_tiles)
        for tile_id, tr in self.tile_results.items():
            if not tr.is_valid:
                issues.add(tile_id)
        return sorted(issues)


def validate_ruleset(ruleset: 'Ruleset') -> RulesetReport:
    """
    Check a ruleset for completeness and symmetry.

    Checks:
    1. Every tile has at least one legal neighbor on each side
    2. Every declared permission is also declared by the other tile
       (one-sided declarations are ignored by the solver)

    Args:
        ruleset: The ruleset to validate

    Returns:
        RulesetReport with details about any issues
    """
    result = RulesetReport()

    for tile in ruleset.tiles:
        tile_result = TileValidation(tile_id=tile.id)
        has_any_neighbor = False

        for direction in DIRECTIONS:
            legal = ruleset.supported(tile.id, direction)
            if not legal:
                tile_result.missing_sides.append(direction.key)
            else:
                has_any_neighbor = True

            unreturned = sorted(tile.permitted(direction) - legal)
            if unreturned:
                tile_result.one_sided[direction.key] = unreturned

        if not has_any_neighbor:
            result.orphan_tiles.append(tile.id)

        result.tile_results[tile.id] = tile_result

    return result


def find_violations(
    ruleset: 'Ruleset',
    grid: Sequence[Optional[int]],
    width: int
) -> List[str]:
    """
    Check every pair of resolved neighbors in a grid.
    Unresolved (None) cells are skipped. Returns error messages.
    """
    errors = []
    if width <= 0 or not grid:
        return errors

    height = len(grid) // width
    for index, tile_id in enumerate(grid):
        if tile_id is None:
            continue
        for n_index, direction in grid_neighbors(index, width, height):
            neighbor_tile = grid[n_index]
            if neighbor_tile is None:
                continue
            if not ruleset.can_be_neighbor(tile_id, direction, neighbor_tile):
                row, col = divmod(index, width)
                errors.append(
                    f"({row},{col}) tile {tile_id} does not allow tile {neighbor_tile} on {direction.key}"
                )

    return errors
