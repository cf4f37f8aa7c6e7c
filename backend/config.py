"""
Game configuration loaded from the environment.

Uses environment variables (a local .env file is picked up via python-dotenv):
- SNAKE_GRID_SIZE: board side length
- SNAKE_INITIAL_SPEED: starting tick interval in ms
- SNAKE_MIN_SPEED: fastest allowed tick interval in ms
- SNAKE_SPEED_INCREMENT: ms removed from the interval per food eaten
- SNAKE_OBSTACLE_COUNT: obstacles placed at every reset
- SNAKE_SEED: optional RNG seed for reproducible sessions
"""

import os
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from domain.constants import (
    GRID_SIZE,
    INITIAL_SPEED,
    MIN_SPEED,
    SPEED_INCREMENT_AMOUNT,
    OBSTACLE_COUNT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Tuning constants fixed for the lifetime of an engine."""
    grid_size: int = GRID_SIZE
    initial_speed: int = INITIAL_SPEED
    min_speed: int = MIN_SPEED
    speed_increment: int = SPEED_INCREMENT_AMOUNT
    obstacle_count: int = OBSTACLE_COUNT
    seed: Optional[int] = None

    def validate(self) -> "GameConfig":
        """
        Check the configuration before any session starts.

        The grid must leave room for every obstacle, the snake and one food
        cell, otherwise random placement could never finish.

        Returns:
            self, so calls can be chained

        Raises:
            ValueError: If any value is out of range
        """
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.obstacle_count < 0:
            raise ValueError(f"obstacle_count cannot be negative, got {self.obstacle_count}")
        if self.obstacle_count + 1 >= self.grid_size * self.grid_size:
            raise ValueError(
                f"A {self.grid_size}x{self.grid_size} grid has no room for "
                f"{self.obstacle_count} obstacles plus the snake and food"
            )
        if self.min_speed <= 0:
            raise ValueError(f"min_speed must be positive, got {self.min_speed}")
        if self.initial_speed < self.min_speed:
            raise ValueError(
                f"initial_speed ({self.initial_speed}) is below min_speed ({self.min_speed})"
            )
        if self.speed_increment < 0:
            raise ValueError(f"speed_increment cannot be negative, got {self.speed_increment}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _int_from_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")


def load_config(**overrides) -> GameConfig:
    """
    Build a validated GameConfig from the environment.

    Keyword overrides (e.g. from CLI flags) win over environment values;
    None overrides are ignored.
    """
    load_dotenv()

    values = {
        "grid_size": _int_from_env("SNAKE_GRID_SIZE", GRID_SIZE),
        "initial_speed": _int_from_env("SNAKE_INITIAL_SPEED", INITIAL_SPEED),
        "min_speed": _int_from_env("SNAKE_MIN_SPEED", MIN_SPEED),
        "speed_increment": _int_from_env("SNAKE_SPEED_INCREMENT", SPEED_INCREMENT_AMOUNT),
        "obstacle_count": _int_from_env("SNAKE_OBSTACLE_COUNT", OBSTACLE_COUNT),
        "seed": _int_from_env("SNAKE_SEED", None),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    config = GameConfig(**values).validate()
    logger.debug(f"Loaded game config: {config}")
    return config
