"""Tests for wfc2d.core.propagator module."""

import random

from wfc2d.core import Propagator, Ruleset, Tile, collapse_cell, select_cell


class TestPropagateBasics:
    """Tests for single propagate() calls."""

    def test_collapse_restricts_vertical_neighbors(self, vertical_ruleset, make_wave):
        """Test tile 1 in the center forces tile 0 above and below."""
        wave = make_wave(vertical_ruleset, 3, 3)
        wave.collapse(4, 1)

        assert Propagator().propagate(wave, [4]) is True

        assert wave.cells[1].possibilities == {0}
        assert wave.cells[7].possibilities == {0}
        assert wave.cells[3].possibilities == {0, 1, 2, 3}
        assert wave.cells[5].possibilities == {0, 1, 2, 3}
        assert not wave.is_contradicted

    def test_neighbor_permissions_are_checked(self, make_wave, make_uniform_tile):
        """Test a neighbor that refuses tile 1 is removed even if tile 1 allows it."""
        ids = frozenset(range(3))
        ruleset = Ruleset.load([
            make_uniform_tile(0, ids),
            make_uniform_tile(1, ids),
            # Tile 2 does not allow tile 1 below it
            Tile(id=2, up=ids, down={0, 2}, left=ids, right=ids),
        ])
        wave = make_wave(ruleset, 2, 1)
        wave.collapse(1, 1)

        Propagator().propagate(wave, [1])

        assert wave.cells[0].possibilities == {0, 1}

    def test_contradiction_stops_propagation(self, make_wave, make_uniform_tile):
        """Test a cell above tile 1 empties when tile 0 refuses tile 1 below."""
        ids = frozenset(range(4))
        ruleset = Ruleset.load([
            Tile(id=0, up=ids, down={0, 2, 3}, left=ids, right=ids),
            Tile(id=1, up={0}, down={0}, left=ids, right=ids),
            make_uniform_tile(2, ids),
            make_uniform_tile(3, ids),
        ])
        wave = make_wave(ruleset, 3, 3)
        wave.collapse(4, 1)

        assert Propagator().propagate(wave, [4]) is False

        assert wave.contradiction == 1
        assert wave.cells[1].possibilities == frozenset()

    def test_cascade_reaches_far_cells(self, checkerboard_ruleset, make_wave):
        """Test collapsing one cell of a checkerboard fixes the whole grid."""
        wave = make_wave(checkerboard_ruleset, 4, 5)
        wave.collapse(0, 0)

        Propagator().propagate(wave, [0])

        assert wave.is_fully_collapsed()
        for index, tile_id in enumerate(wave.output_grid()):
            row, col = divmod(index, 5)
            assert tile_id == (row + col) % 2

    def test_no_seeds(self, free_ruleset, make_wave):
        wave = make_wave(free_ruleset, 2, 2)
        propagator = Propagator()
        assert propagator.propagate(wave, []) is True
        assert propagator.visited == 0

    def test_already_contradicted(self, free_ruleset, make_wave):
        wave = make_wave(free_ruleset, 2, 2)
        wave.restrict(0, set())
        assert Propagator().propagate(wave, [1]) is False

    def test_duplicate_seeds_visited_once(self, free_ruleset, make_wave):
        wave = make_wave(free_ruleset, 2, 2)
        propagator = Propagator()
        propagator.propagate(wave, [0, 0, 0])
        assert propagator.visited == 1


class TestPropagateProperties:
    """Monotonicity and termination properties."""

    def test_monotonic(self, terrain_ruleset, make_wave):
        """Test no restrict call during propagation grows a cell."""
        wave = make_wave(terrain_ruleset, 6, 6)
        original_restrict = wave.restrict
        sizes_seen = []

        def checked_restrict(index, allowed):
            before = wave.cells[index].entropy
            changed = original_restrict(index, allowed)
            sizes_seen.append((before, wave.cells[index].entropy))
            return changed

        wave.restrict = checked_restrict
        rng = random.Random(3)
        propagator = Propagator()

        while not wave.is_fully_collapsed() and not wave.is_contradicted:
            before = [c.possibilities for c in wave.cells]
            index = select_cell(wave)
            collapse_cell(wave, index, rng)
            propagator.propagate(wave, [index])
            for cell, previous in zip(wave.cells, before):
                assert cell.possibilities <= previous

        assert sizes_seen
        assert all(after <= before for before, after in sizes_seen)

    def test_work_is_bounded_by_removals(self, terrain_ruleset, make_wave):
        """Test every revisit is paid for by a removed possibility."""
        wave = make_wave(terrain_ruleset, 8, 8)
        total_before = wave.total_possibilities()
        wave.collapse(27, 0)
        wave.collapse(36, 2)
        propagator = Propagator()

        propagator.propagate(wave, [27, 36])

        assert propagator.visited <= 2 + propagator.removed
        assert wave.total_possibilities() <= total_before - propagator.removed

    def test_full_seed_reaches_fixed_point(self, trap_ruleset, make_wave):
        """Test seeding every cell prunes tiles without support."""
        wave = make_wave(trap_ruleset, 2, 3)

        Propagator().propagate(wave, range(len(wave)))

        # Tile 0 allows nothing on its right, so only the last column keeps it
        for index, cell in enumerate(wave.cells):
            if index % 3 == 2:
                assert cell.possibilities == {0, 1}
            else:
                assert cell.possibilities == {1}
