"""
GameSnapshot - an immutable view of the game at a point in time.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

from .constants import IDLE, RIGHT
from .grid import Cell


@dataclass(frozen=True)
class GameSnapshot:
    """
    A read-only snapshot published after every tick and lifecycle change.

    Attributes:
        tick: number of steps executed in the current session
        snake: cells from head to tail
        food: food cell, None before the first game starts
        obstacles: obstacle cells
        score: food eaten this session
        speed: current tick interval in milliseconds
        direction: committed direction
        game_state: one of IDLE, RUNNING, GAME_OVER
        grid_size: board side length
        death_reason: 'wall', 'self' or 'obstacle' once the game is over
        game_id: session id, None before the first game starts
    """
    tick: int
    snake: Tuple[Cell, ...]
    food: Optional[Cell]
    obstacles: FrozenSet[Cell]
    score: int
    speed: int
    grid_size: int
    direction: str = RIGHT
    game_state: str = IDLE
    death_reason: Optional[str] = None
    game_id: Optional[str] = None

    @property
    def head(self) -> Optional[Cell]:
        return self.snake[0] if self.snake else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation (cells become [x, y] lists)."""
        return {
            "tick": self.tick,
            "snake": [list(cell) for cell in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "obstacles": [list(cell) for cell in sorted(self.obstacles)],
            "score": self.score,
            "speed": self.speed,
            "direction": self.direction,
            "game_state": self.game_state,
            "grid_size": self.grid_size,
            "death_reason": self.death_reason,
            "game_id": self.game_id,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        # = obstacle
        H = snake head
        S = snake body
        Row 0 is printed first (top of the screen), x-axis labels at the bottom.
        """
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        for ox, oy in self.obstacles:
            board[oy][ox] = '#'

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'

        for idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if idx == 0 else 'S'

        result = []
        for y in range(self.grid_size):
            result.append(f"{y:2d} {' '.join(board[y])}")

        # Single-digit column labels keep the grid aligned
        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameSnapshot tick={self.tick}, state={self.game_state}, "
            f"length={len(self.snake)}, food={self.food}, score={self.score}>"
        )
