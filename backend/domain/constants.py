"""
Game constants for the grid snake engine.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Screen coordinates: (0, 0) is the top-left cell, UP decreases y
DIRECTION_VECTORS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITE_DIRECTIONS = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Lifecycle states
IDLE = "IDLE"
RUNNING = "RUNNING"
GAME_OVER = "GAME_OVER"
VALID_GAME_STATES = {IDLE, RUNNING, GAME_OVER}

# Death reasons
DEATH_WALL = "wall"
DEATH_SELF = "self"
DEATH_OBSTACLE = "obstacle"

# Default game settings (speed values are tick intervals in milliseconds)
GRID_SIZE = 20
INITIAL_SPEED = 200
MIN_SPEED = 50
SPEED_INCREMENT_AMOUNT = 5
OBSTACLE_COUNT = 5
