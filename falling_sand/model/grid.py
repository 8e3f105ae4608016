"""Particle grid for the falling sand simulation."""

import numpy as np
from typing import Tuple

from .particle import Particle


class OutOfBounds(IndexError):
    """Raised when a cell outside the grid is accessed."""

    def __init__(self, col: int, row: int, width: int, height: int):
        super().__init__(
            f"Cell ({col}, {row}) outside grid of size {width}x{height}")
        self.col = col
        self.row = row


class Grid:
    """
    Fixed-size 2D array of particles; the only mutable simulation state.

    Coordinate convention: (col, row) for API, [row, col] for array indexing.
    Row 0 is the bottom of the grid.
    """

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

        # Every cell holds a Particle value, EMPTY at creation
        self._cells = np.full((height, width), Particle.EMPTY, dtype=np.uint8)

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the cell array, indexed [row, col]."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, col: int, row: int) -> bool:
        """Check if cell is within the grid."""
        return 0 <= col < self.width and 0 <= row < self.height

    def _check(self, col: int, row: int) -> None:
        # Only whole cell indices address the grid
        integral = all(isinstance(v, (int, np.integer)) and not isinstance(v, bool)
                       for v in (col, row))
        if not integral or not self.in_bounds(col, row):
            raise OutOfBounds(col, row, self.width, self.height)

    def get(self, col: int, row: int) -> Particle:
        """Return the particle at a cell."""
        self._check(col, row)
        return Particle(int(self._cells[row, col]))

    def set(self, col: int, row: int, value: Particle) -> None:
        """Overwrite a cell unconditionally."""
        self._check(col, row)
        self._cells[row, col] = value

    def swap(self, a: Tuple[int, int], b: Tuple[int, int]) -> None:
        """Exchange the contents of two cells."""
        self._check(*a)
        self._check(*b)
        (ac, ar), (bc, br) = a, b
        self._cells[ar, ac], self._cells[br, bc] = self._cells[br, bc], self._cells[ar, ac]

    def clear(self) -> None:
        """Reset every cell to EMPTY."""
        self._cells.fill(Particle.EMPTY)

    def fill_rectangle(self, x: int, y: int, w: int, h: int,
                       value: Particle) -> None:
        """Fill rectangular region with a material, clamped to the grid."""
        x_end = min(x + w, self.width)
        y_end = min(y + h, self.height)
        x = max(0, x)
        y = max(0, y)
        self._cells[y:y_end, x:x_end] = value

    def count(self, value: Particle) -> int:
        return int(np.count_nonzero(self._cells == value))

    def count_non_empty(self) -> int:
        return int(np.count_nonzero(self._cells != Particle.EMPTY))

    def copy(self) -> "Grid":
        other = Grid(self.width, self.height)
        other._cells[:] = self._cells
        return other

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def __repr__(self) -> str:
        return (f"Grid({self.width}x{self.height}, "
                f"non_empty={self.count_non_empty()})")
