"""
Random placement of food and obstacles on free cells.
"""

import logging
import random
from typing import AbstractSet, List, Optional, Set

from .grid import Cell, cell_count

logger = logging.getLogger(__name__)


def place_random(
    occupied: AbstractSet[Cell],
    grid_size: int,
    rng: Optional[random.Random] = None
) -> Cell:
    """
    Draw a uniformly random cell that is not in ``occupied``.

    Resamples until a free cell comes up. The grid is finite, so this
    terminates as long as at least one cell is free.

    Raises:
        ValueError: If ``occupied`` already covers the whole grid
    """
    rng = rng or random
    if len(occupied) >= cell_count(grid_size):
        raise ValueError(
            f"No free cell left on a {grid_size}x{grid_size} grid "
            f"({len(occupied)} cells occupied)"
        )

    while True:
        x = rng.randint(0, grid_size - 1)
        y = rng.randint(0, grid_size - 1)
        if (x, y) not in occupied:
            return (x, y)


def place_obstacles(
    count: int,
    occupied: AbstractSet[Cell],
    grid_size: int,
    rng: Optional[random.Random] = None
) -> List[Cell]:
    """
    Place ``count`` obstacles one at a time.

    Each new obstacle joins the occupied set before the next draw, so
    obstacles never overlap each other or anything already in ``occupied``.
    """
    taken: Set[Cell] = set(occupied)
    obstacles: List[Cell] = []
    for _ in range(count):
        cell = place_random(taken, grid_size, rng)
        taken.add(cell)
        obstacles.append(cell)
    return obstacles


def place_food(
    snake_cells,
    obstacles: AbstractSet[Cell],
    grid_size: int,
    rng: Optional[random.Random] = None
) -> Cell:
    """Place food against the union of the whole snake body and all obstacles."""
    occupied = set(snake_cells) | set(obstacles)
    food = place_random(occupied, grid_size, rng)
    logger.debug(f"Placed food at {food} ({len(occupied)} cells occupied)")
    return food
