"""Tests for wfc2d.core.tile module."""

import pytest

from wfc2d.core import (
    DIRECTIONS,
    Direction,
    EmptyRulesetError,
    InvalidRuleError,
    Ruleset,
    Tile,
)


class TestDirection:
    """Tests for Direction enum."""

    def test_order(self):
        """Test directions are listed Up, Down, Left, Right."""
        assert DIRECTIONS == [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]

    def test_opposites(self):
        assert Direction.UP.opposite is Direction.DOWN
        assert Direction.DOWN.opposite is Direction.UP
        assert Direction.LEFT.opposite is Direction.RIGHT
        assert Direction.RIGHT.opposite is Direction.LEFT

    def test_offsets(self):
        assert Direction.UP.offset == (-1, 0)
        assert Direction.RIGHT.offset == (0, 1)

    def test_keys(self):
        assert [d.key for d in DIRECTIONS] == ['up', 'down', 'left', 'right']


class TestTile:
    """Tests for Tile dataclass."""

    def test_iterables_become_frozensets(self):
        tile = Tile(id=0, up=[0, 1], down={1}, left=(0,), right=[])
        assert tile.up == frozenset({0, 1})
        assert isinstance(tile.left, frozenset)
        assert tile.right == frozenset()

    def test_permitted(self):
        tile = Tile(id=0, up={1}, down={2}, left={3}, right={4})
        assert tile.permitted(Direction.DOWN) == {2}
        assert tile.permitted(Direction.RIGHT) == {4}

    def test_immutability(self):
        tile = Tile(id=0)
        with pytest.raises(AttributeError):
            tile.id = 3  # type: ignore

    def test_dict_roundtrip(self):
        tile = Tile(id=2, up={0, 1}, down={2}, left=set(), right={1}, weight=3.0)
        assert Tile.from_dict(tile.to_dict()) == tile


class TestRulesetLoad:
    """Tests for Ruleset.load validation."""

    def test_empty_input(self):
        with pytest.raises(EmptyRulesetError):
            Ruleset.load([])

    def test_out_of_range_reference(self):
        with pytest.raises(InvalidRuleError):
            Ruleset.load([Tile(id=0, up={0}, down={0}, left={0}, right={5})])

    def test_negative_reference(self):
        with pytest.raises(InvalidRuleError):
            Ruleset.load([Tile(id=0, up={-1})])

    def test_misplaced_id(self):
        with pytest.raises(InvalidRuleError):
            Ruleset.load([Tile(id=1)])

    def test_non_positive_weight(self):
        with pytest.raises(InvalidRuleError):
            Ruleset.load([Tile(id=0, weight=0)])

    def test_errors_are_configuration_errors(self):
        from wfc2d.core import ConfigurationError
        assert issubclass(EmptyRulesetError, ConfigurationError)
        assert issubclass(InvalidRuleError, ConfigurationError)

    def test_tile_count(self, free_ruleset: Ruleset):
        assert free_ruleset.tile_count() == 4
        assert len(free_ruleset) == 4
        assert free_ruleset.all_ids == frozenset(range(4))


class TestRulesetAdjacency:
    """Tests for permission and support lookups."""

    def test_permitted_neighbors(self, vertical_ruleset: Ruleset):
        assert vertical_ruleset.permitted_neighbors(1, Direction.UP) == {0}
        assert vertical_ruleset.permitted_neighbors(1, Direction.LEFT) == {0, 1, 2, 3}

    def test_support_requires_both_sides(self):
        """Test a one-sided declaration is not a legal adjacency."""
        ruleset = Ruleset.load([
            Tile(id=0, right={0, 1}, left={0}),
            Tile(id=1, left=set(), right={1}),
        ])
        # 0 permits 1 on its right, but 1 does not permit 0 on its left
        assert 1 in ruleset.permitted_neighbors(0, Direction.RIGHT)
        assert ruleset.supported(0, Direction.RIGHT) == {0}
        assert not ruleset.can_be_neighbor(0, Direction.RIGHT, 1)

    def test_support_mirrors(self, terrain_ruleset: Ruleset):
        for direction in DIRECTIONS:
            for a in range(3):
                for b in terrain_ruleset.supported(a, direction):
                    assert a in terrain_ruleset.supported(b, direction.opposite)

    def test_weights(self, trap_ruleset: Ruleset):
        assert trap_ruleset.weight(0) == 1e9
        assert trap_ruleset.weight(1) == 1.0
