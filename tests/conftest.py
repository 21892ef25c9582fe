"""Shared pytest fixtures for wfc2d tests."""

import pytest

from wfc2d.core import Ruleset, Tile, Wave, WaveFunctionCollapse2D


ALL_SIDES = ('up', 'down', 'left', 'right')


def uniform_tile(tile_id: int, allowed, weight: float = 1.0) -> Tile:
    """A tile allowing the same ids on every side."""
    allowed = frozenset(allowed)
    return Tile(id=tile_id, up=allowed, down=allowed, left=allowed, right=allowed, weight=weight)


# =============================================================================
# Rulesets
# =============================================================================

@pytest.fixture
def single_tile_ruleset() -> Ruleset:
    """One tile that permits itself on every side."""
    return Ruleset.load([uniform_tile(0, {0})])


@pytest.fixture
def free_ruleset() -> Ruleset:
    """Four tiles, any tile may sit next to any other."""
    ids = range(4)
    return Ruleset.load([uniform_tile(i, ids) for i in ids])


@pytest.fixture
def checkerboard_ruleset() -> Ruleset:
    """Two tiles that only sit next to the other one."""
    return Ruleset.load([uniform_tile(0, {1}), uniform_tile(1, {0})])


@pytest.fixture
def terrain_ruleset() -> Ruleset:
    """Grass(0), sand(1), water(2): grass and water never touch."""
    return Ruleset.load([
        uniform_tile(0, {0, 1}),
        uniform_tile(1, {0, 1, 2}),
        uniform_tile(2, {1, 2}),
    ])


@pytest.fixture
def vertical_ruleset() -> Ruleset:
    """
    Tile 1 permits only tile 0 above and below, any tile left and right.
    Tiles 0, 2 and 3 permit everything.
    """
    ids = frozenset(range(4))
    return Ruleset.load([
        uniform_tile(0, ids),
        Tile(id=1, up={0}, down={0}, left=ids, right=ids),
        uniform_tile(2, ids),
        uniform_tile(3, ids),
    ])


@pytest.fixture
def hostile_ruleset() -> Ruleset:
    """Two tiles with no legal adjacency in any direction."""
    return Ruleset.load([uniform_tile(0, {1}), uniform_tile(1, set())])


@pytest.fixture
def trap_ruleset() -> Ruleset:
    """
    Heavily weighted tile 0 allows nothing to its right, so picking it for
    anything but the last column dead-ends one step later.
    """
    return Ruleset.load([
        Tile(id=0, up={0, 1}, down={0, 1}, left={1}, right=set(), weight=1e9),
        Tile(id=1, up={0, 1}, down={0, 1}, left={1}, right={0, 1}),
    ])


# =============================================================================
# Waves and solvers
# =============================================================================

@pytest.fixture
def make_wave():
    """Factory for initialized waves."""
    def _make(ruleset: Ruleset, rows: int, cols: int) -> Wave:
        wave = Wave()
        wave.initialize(ruleset, rows, cols)
        return wave
    return _make


@pytest.fixture
def solver() -> WaveFunctionCollapse2D:
    """A solver with default settings and no grid yet."""
    return WaveFunctionCollapse2D()


@pytest.fixture
def make_uniform_tile():
    """Factory for tiles allowing the same ids on every side."""
    return uniform_tile
