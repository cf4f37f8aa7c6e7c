"""
Coordinate helpers for the square game grid.

Cells are plain ``(x, y)`` integer tuples. There is no wraparound: a cell
outside ``[0, grid_size)`` on either axis is simply off the board.
"""

from typing import Tuple

from .constants import DIRECTION_VECTORS

Cell = Tuple[int, int]


def cells_equal(a: Cell, b: Cell) -> bool:
    """Exact integer comparison of two cells."""
    return a[0] == b[0] and a[1] == b[1]


def in_bounds(cell: Cell, grid_size: int) -> bool:
    x, y = cell
    return 0 <= x < grid_size and 0 <= y < grid_size


def move_cell(cell: Cell, direction: str) -> Cell:
    """Return the neighbouring cell one step in ``direction``."""
    dx, dy = DIRECTION_VECTORS[direction]
    return (cell[0] + dx, cell[1] + dy)


def grid_center(grid_size: int) -> Cell:
    return (grid_size // 2, grid_size // 2)


def cell_count(grid_size: int) -> int:
    return grid_size * grid_size
