"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Tuple


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
    """

    def __init__(self, positions: List[Tuple[int, int]]):
        if not positions:
            raise ValueError("A snake needs at least one cell.")
        self.positions = deque(positions)

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    def __len__(self) -> int:
        return len(self.positions)

    def occupies(self, cell: Tuple[int, int]) -> bool:
        """
        True if any body cell, tail included, equals ``cell``.

        The tail still counts as occupied even on ticks where it is about
        to be vacated.
        """
        return cell in self.positions

    def advance(self, new_head: Tuple[int, int], grow: bool = False) -> None:
        """Prepend ``new_head``; drop the tail unless the snake grows."""
        self.positions.appendleft(new_head)
        if not grow:
            self.positions.pop()
