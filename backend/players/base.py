"""
Base player interface for the game engine.

A player stands in for the view layer's keyboard: it looks at the latest
snapshot and answers with the direction it would press.
"""

import random
from typing import List, Optional

from domain.constants import VALID_MOVES, OPPOSITE_DIRECTIONS
from domain.game_snapshot import GameSnapshot
from domain.grid import in_bounds, move_cell


class Player:
    """
    Base class/interface for player logic.
    """

    def __init__(self, name: Optional[str] = None, rng: Optional[random.Random] = None):
        self.name = name or self.__class__.__name__
        self.rng = rng or random.Random()

    def get_move(self, game_state: GameSnapshot) -> str:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Latest snapshot published by the engine

        Returns:
            One of: "UP", "DOWN", "LEFT", "RIGHT"
        """
        raise NotImplementedError


def safe_moves(game_state: GameSnapshot) -> List[str]:
    """
    Moves that survive the next tick.

    Filters out moves that:
    1. Reverse the committed direction (the engine would ignore them)
    2. Hit walls
    3. Hit obstacles
    4. Hit the body, tail included (the tail still counts as occupied)
    """
    if not game_state.snake:
        return []

    head = game_state.head
    body = set(game_state.snake)
    reverse = OPPOSITE_DIRECTIONS[game_state.direction]

    moves = []
    for move in sorted(VALID_MOVES):
        if move == reverse:
            continue
        cell = move_cell(head, move)
        if not in_bounds(cell, game_state.grid_size):
            continue
        if cell in game_state.obstacles or cell in body:
            continue
        moves.append(move)
    return moves
