"""
Single-slot buffer for direction requests.
"""

from .constants import RIGHT, VALID_MOVES, OPPOSITE_DIRECTIONS


class DirectionBuffer:
    """
    Holds the committed direction and at most one pending request.

    Requests are checked against the committed direction (the one in effect
    this tick), not against whatever is pending. Later requests overwrite
    earlier ones; only the latest survives to the next ``commit()``.
    """

    def __init__(self, initial: str = RIGHT):
        if initial not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{initial}'.")
        self.committed = initial
        self.pending = initial

    def request(self, direction: str) -> bool:
        """
        Store ``direction`` as pending unless it reverses the committed one.

        Returns:
            True if the request was stored, False if it was ignored

        Raises:
            ValueError: If ``direction`` is not one of UP, DOWN, LEFT, RIGHT
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{direction}'.")
        if direction == OPPOSITE_DIRECTIONS[self.committed]:
            return False
        self.pending = direction
        return True

    def commit(self) -> str:
        """Make the pending direction the committed one and return it."""
        self.committed = self.pending
        return self.committed
