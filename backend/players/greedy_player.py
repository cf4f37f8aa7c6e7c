"""
Greedy player implementation - heads for the food along safe moves.
"""

from domain.game_snapshot import GameSnapshot
from domain.grid import move_cell
from .base import Player, safe_moves


def manhattan(a, b) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class GreedyPlayer(Player):
    """
    Picks the safe move that brings the head closest to the food.

    Ties are broken randomly; with no food on the board it wanders like
    RandomPlayer.
    """

    def get_move(self, game_state: GameSnapshot) -> str:
        valid_moves = safe_moves(game_state)
        if not valid_moves:
            return game_state.direction

        if game_state.food is None:
            return self.rng.choice(valid_moves)

        head = game_state.head
        distances = {
            move: manhattan(move_cell(head, move), game_state.food)
            for move in valid_moves
        }
        best = min(distances.values())
        return self.rng.choice([m for m, d in distances.items() if d == best])
