"""
Random player implementation - picks random safe moves.
"""

from domain.game_snapshot import GameSnapshot
from .base import Player, safe_moves


class RandomPlayer(Player):
    """
    A random AI that picks a direction avoiding walls, obstacles and its own body.
    """

    def get_move(self, game_state: GameSnapshot) -> str:
        valid_moves = safe_moves(game_state)

        # If no valid moves, keep going straight (we'll die anyway)
        if not valid_moves:
            return game_state.direction

        return self.rng.choice(valid_moves)
