"""
Domain entities for the grid snake engine.

This module contains the core game entities that are independent of
infrastructure concerns (timers, HTTP, terminal output).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITE_DIRECTIONS,
    IDLE, RUNNING, GAME_OVER, VALID_GAME_STATES,
)
from .grid import Cell, cells_equal, in_bounds, move_cell, grid_center
from .placement import place_random, place_obstacles, place_food
from .direction_buffer import DirectionBuffer
from .snake import Snake
from .game_snapshot import GameSnapshot

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITE_DIRECTIONS',
    'IDLE', 'RUNNING', 'GAME_OVER', 'VALID_GAME_STATES',
    'Cell', 'cells_equal', 'in_bounds', 'move_cell', 'grid_center',
    'place_random', 'place_obstacles', 'place_food',
    'DirectionBuffer',
    'Snake',
    'GameSnapshot',
]
