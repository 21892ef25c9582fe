"""
Constraint propagation over the wave.
"""

from collections import deque
from typing import Iterable

from ..logging_config import get_logger, log_propagation
from .wave import Wave

logger = get_logger(__name__)


class Propagator:
    """
    Restores arc consistency after cells lose possibilities.

    Works a FIFO queue of dirty cells. For each neighbor n of a dirty cell
    c, the tiles n may keep are the union of what every tile still possible
    in c supports on n's side. Possibility sets only ever shrink, so the
    queue always drains; a cell emptying out stops the pass at once and
    leaves the contradiction recorded on the wave.
    """

    def __init__(self):
        self.visited = 0
        self.removed = 0

    def propagate(self, wave: Wave, seeds: Iterable[int]) -> bool:
        """
        Propagate from `seeds` until a fixed point or a contradiction.

        Args:
            wave: Wave to narrow in place
            seeds: Indices of cells whose possibilities changed

        Returns:
            True if the wave is consistent, False on contradiction
        """
        if wave.is_contradicted:
            return False

        ruleset = wave.ruleset
        cells = wave.cells
        queue = deque()
        queued = set()
        for index in seeds:
            if index not in queued:
                queue.append(index)
                queued.add(index)

        seed_count = len(queue)
        self.visited = 0
        self.removed = 0

        while queue:
            index = queue.popleft()
            queued.discard(index)
            self.visited += 1
            source = cells[index].possibilities

            for n_index, direction in wave.neighbors(index):
                neighbor = cells[n_index]
                allowed = _union_support(ruleset, source, direction)
                before = neighbor.entropy
                if not wave.restrict(n_index, allowed):
                    continue

                self.removed += before - neighbor.entropy
                if wave.is_contradicted:
                    log_propagation(logger, seed_count, self.visited, self.removed, wave.contradiction)
                    return False
                if n_index not in queued:
                    queue.append(n_index)
                    queued.add(n_index)

        log_propagation(logger, seed_count, self.visited, self.removed)
        return True


def _union_support(ruleset, tile_ids, direction):
    """All tiles that some tile in `tile_ids` supports in `direction`."""
    if len(tile_ids) == 1:
        return ruleset.supported(next(iter(tile_ids)), direction)
    allowed = set()
    for tile_id in tile_ids:
        allowed |= ruleset.supported(tile_id, direction)
    return allowed
