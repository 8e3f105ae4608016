"""Tick engine for the falling sand simulation."""

from itertools import groupby
from typing import List, Optional, Tuple

import numpy as np

from .grid import Grid
from .particle import Particle, DISPLACEABLE
from .state import Cell, Move, TickReport


class TickEngine:
    """
    Advances a Grid by one discrete step.

    Implements:
    1. Move-candidate generation (collected, not applied, during the scan)
    2. Conflict resolution (random winner per destination)
    3. Spawning of one sand grain in the top row

    The engine keeps no state between ticks; the grid is mutated in place.
    """

    # Offsets tried in priority order by a falling grain: below,
    # below-left, below-right
    SAND_OFFSETS: Tuple[Cell, ...] = ((0, -1), (-1, -1), (1, -1))

    def __init__(self, spawn_enabled: bool = True):
        self.spawn_enabled = spawn_enabled

    def step(self, grid: Grid, rng: np.random.Generator) -> TickReport:
        """
        Execute one discrete time step.

        1. Collect candidate moves for every particle
        2. Pick one winner per destination and swap it into place
        3. Spawn a sand grain at a random top-row column
        4. Return a report of the tick
        """
        moves = self.generate_moves(grid)
        winners, contested = self.resolve_conflicts(moves, rng)
        self.apply_moves(grid, winners)

        spawn_col = self.spawn(grid, rng) if self.spawn_enabled else None

        return TickReport(
            proposed=len(moves),
            applied=len(winners),
            contested=contested,
            spawn_col=spawn_col,
            counts=count_particles(grid),
        )

    def generate_moves(self, grid: Grid) -> List[Move]:
        """Scan the grid column-major and propose at most one move per cell."""
        cells = grid.cells
        moves = []
        # Transposed so the scan runs column by column
        cols, rows = np.nonzero(cells.T == Particle.SAND)
        for col, row in zip(cols.tolist(), rows.tolist()):
            destination = self._sand_candidate(grid, col, row)
            if destination is not None:
                moves.append(Move(source=(col, row), destination=destination))
        # Water has no movement rule of its own; it only moves when
        # displaced by sand.
        return moves

    def _sand_candidate(self, grid: Grid, col: int,
                        row: int) -> Optional[Cell]:
        """Return the first eligible destination for a grain, if any."""
        for dc, dr in self.SAND_OFFSETS:
            nc, nr = col + dc, row + dr
            if grid.in_bounds(nc, nr) and grid.get(nc, nr) in DISPLACEABLE:
                return nc, nr
        return None

    def resolve_conflicts(self, moves: List[Move],
                          rng: np.random.Generator) -> Tuple[List[Move], int]:
        """
        Pick exactly one move per destination.

        Moves are sorted by (destination column, destination row) and split
        into runs sharing a destination; one member of each run is chosen
        uniformly at random. Returns the winners and the number of
        destinations that had more than one candidate.
        """
        winners = []
        contested = 0
        for _, group in groupby(sorted(moves, key=Move.sort_key),
                                key=Move.sort_key):
            run = list(group)
            if len(run) == 1:
                winners.append(run[0])
            else:
                contested += 1
                winners.append(run[int(rng.integers(len(run)))])
        return winners, contested

    def apply_moves(self, grid: Grid, moves: List[Move]) -> None:
        """Swap source and destination of each winning move."""
        for move in moves:
            grid.swap(move.source, move.destination)

    def spawn(self, grid: Grid, rng: np.random.Generator) -> int:
        """Write one sand grain at a random column of the top row."""
        width, height = grid.dimensions()
        col = int(rng.integers(width))
        grid.set(col, height - 1, Particle.SAND)
        return col


def count_particles(grid: Grid) -> dict:
    """Return cell counts keyed by lower-case particle name."""
    return {p.name.lower(): grid.count(p) for p in Particle}
