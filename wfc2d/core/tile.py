"""
Tile definitions and the immutable ruleset the solver works from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

from .errors import EmptyRulesetError, InvalidRuleError


class Direction(Enum):
    """Neighbor directions, in the order neighbors are always visited."""
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @property
    def offset(self) -> Tuple[int, int]:
        """(row delta, column delta) of the neighbor in this direction."""
        return _OFFSETS[self]

    @property
    def key(self) -> str:
        """Name used for this direction in rule files."""
        return self.name.lower()


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_OFFSETS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

DIRECTIONS: List[Direction] = list(Direction)


@dataclass(frozen=True)
class Tile:
    """A ruleset entry: which tiles may sit on each side of this one."""
    id: int
    up: FrozenSet[int] = field(default_factory=frozenset)
    down: FrozenSet[int] = field(default_factory=frozenset)
    left: FrozenSet[int] = field(default_factory=frozenset)
    right: FrozenSet[int] = field(default_factory=frozenset)
    weight: float = 1.0  # relative draw weight when collapsing

    def __post_init__(self):
        # Accept any iterable of ids, store frozensets
        for direction in DIRECTIONS:
            value = getattr(self, direction.key)
            if not isinstance(value, frozenset):
                object.__setattr__(self, direction.key, frozenset(value))

    def permitted(self, direction: Direction) -> FrozenSet[int]:
        """Tile ids this tile allows in the given direction."""
        return getattr(self, direction.key)

    def to_dict(self) -> dict:
        data = {d.key: sorted(self.permitted(d)) for d in DIRECTIONS}
        data['id'] = self.id
        data['weight'] = self.weight
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Tile':
        return cls(
            id=data['id'],
            up=frozenset(data.get('up', ())),
            down=frozenset(data.get('down', ())),
            left=frozenset(data.get('left', ())),
            right=frozenset(data.get('right', ())),
            weight=data.get('weight', 1.0)
        )


class Ruleset:
    """
    Immutable table of tiles indexed by dense id (0..N-1).

    Adjacency is symmetric: tile B may sit in direction d of tile A only
    when A permits B in d AND B permits A in the opposite direction. The
    combined lookup is built once in load() and served by supported().
    """

    def __init__(self, tiles: Tuple[Tile, ...],
                 support: Dict[Direction, Tuple[FrozenSet[int], ...]]):
        self._tiles = tiles
        self._support = support
        self._all_ids = frozenset(range(len(tiles)))

    @classmethod
    def load(cls, tiles: Iterable[Tile]) -> 'Ruleset':
        """
        Validate tile definitions and build a ruleset.

        Raises:
            EmptyRulesetError: If no tiles are given
            InvalidRuleError: If an id is out of range or misplaced, or a
                weight is not positive
        """
        tiles = tuple(tiles)
        if not tiles:
            raise EmptyRulesetError("Ruleset must contain at least one tile")

        count = len(tiles)
        for position, tile in enumerate(tiles):
            if tile.id != position:
                raise InvalidRuleError(
                    f"Tile at position {position} has id {tile.id}; ids must be dense and ordered"
                )
            if tile.weight <= 0:
                raise InvalidRuleError(f"Tile {tile.id} has non-positive weight {tile.weight}")
            for direction in DIRECTIONS:
                for neighbor in tile.permitted(direction):
                    if not 0 <= neighbor < count:
                        raise InvalidRuleError(
                            f"Tile {tile.id} references unknown tile {neighbor} on {direction.key}"
                        )

        support = cls._build_support(tiles)
        return cls(tiles, support)

    @staticmethod
    def _build_support(
        tiles: Sequence[Tile]
    ) -> Dict[Direction, Tuple[FrozenSet[int], ...]]:
        """{direction: per-tile set of ids legal on that side}"""
        support = {}
        for direction in DIRECTIONS:
            opposite = direction.opposite
            per_tile = []
            for tile in tiles:
                per_tile.append(frozenset(
                    n for n in tile.permitted(direction)
                    if tile.id in tiles[n].permitted(opposite)
                ))
            support[direction] = tuple(per_tile)
        return support

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return self._tiles

    @property
    def all_ids(self) -> FrozenSet[int]:
        return self._all_ids

    def tile_count(self) -> int:
        return len(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __getitem__(self, tile_id: int) -> Tile:
        return self._tiles[tile_id]

    def permitted_neighbors(self, tile_id: int, direction: Direction) -> FrozenSet[int]:
        """Tile ids declared as allowed in `direction` of `tile_id`."""
        return self._tiles[tile_id].permitted(direction)

    def supported(self, tile_id: int, direction: Direction) -> FrozenSet[int]:
        """Tile ids that may legally sit in `direction` of `tile_id`."""
        return self._support[direction][tile_id]

    def can_be_neighbor(self, tile_id: int, direction: Direction, neighbor_id: int) -> bool:
        """Check if neighbor_id can be placed in `direction` of tile_id."""
        return neighbor_id in self._support[direction][tile_id]

    def weight(self, tile_id: int) -> float:
        return self._tiles[tile_id].weight

    def __repr__(self) -> str:
        return f"Ruleset({self.tile_count()} tiles)"
