import argparse
import json
import logging
import random
import threading
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional

from dotenv import load_dotenv

from config import GameConfig, load_config
from domain.constants import (
    RIGHT,
    VALID_MOVES,
    IDLE,
    RUNNING,
    GAME_OVER,
    DEATH_WALL,
    DEATH_SELF,
    DEATH_OBSTACLE,
)
from domain.direction_buffer import DirectionBuffer
from domain.game_snapshot import GameSnapshot
from domain.grid import Cell, in_bounds, move_cell, grid_center
from domain.placement import place_obstacles, place_food
from domain.snake import Snake
from players import Player, get_player_class, list_players, AVAILABLE_PLAYERS
from services.tick_scheduler import run_ticks

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[GameSnapshot], None]


class SnakeGame:
    """
    Manages one player's game:
      - Board (square grid, no wraparound)
      - Snake, food and obstacles
      - Pending/committed direction
      - Score and speed
      - Lifecycle (IDLE -> RUNNING -> GAME_OVER -> RUNNING ...)

    Every public mutation runs under a lock, and a fresh immutable
    GameSnapshot is published after each step and lifecycle change.
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        self.config = (config or GameConfig()).validate()
        self.rng = rng or random.Random(self.config.seed)

        self._lock = threading.RLock()
        self._listeners: List[SnapshotListener] = []

        self.game_id: Optional[str] = None
        self.game_state = IDLE
        self.snake: Optional[Snake] = None
        self.food: Optional[Cell] = None
        self.obstacles: frozenset = frozenset()
        self.directions = DirectionBuffer(RIGHT)
        self.score = 0
        self.speed = self.config.initial_speed
        self.tick = 0
        self.death_reason: Optional[str] = None

        self._snapshot = self._build_snapshot()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> GameSnapshot:
        """Begin a new session, discarding whatever came before."""
        with self._lock:
            self._reset()
            snapshot = self._refresh_snapshot()
            self._notify(snapshot)
        return snapshot

    def restart(self) -> GameSnapshot:
        """'Play again' - identical to start()."""
        return self.start()

    def _reset(self):
        grid_size = self.config.grid_size
        previous = self.game_state

        self.game_id = str(uuid.uuid4())
        self.score = 0
        self.speed = self.config.initial_speed
        self.tick = 0
        self.death_reason = None
        self.directions = DirectionBuffer(RIGHT)

        self.snake = Snake([grid_center(grid_size)])
        self.obstacles = frozenset(
            place_obstacles(
                self.config.obstacle_count,
                set(self.snake.positions),
                grid_size,
                self.rng
            )
        )
        self.food = place_food(self.snake.positions, self.obstacles, grid_size, self.rng)
        self.game_state = RUNNING

        logger.info(
            f"Game {self.game_id} started ({previous} -> {RUNNING}): "
            f"snake at {self.snake.head}, food at {self.food}, "
            f"{len(self.obstacles)} obstacles"
        )

    def _end_game(self, reason: str):
        self.game_state = GAME_OVER
        self.death_reason = reason
        logger.info(
            f"Game Over ({reason}) for game {self.game_id} after {self.tick} ticks. "
            f"Score: {self.score}"
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def request_direction(self, direction: str) -> bool:
        """
        Queue a direction change for the next tick.

        Ignored (returns False) while the game is not running or when the
        request reverses the committed direction.

        Raises:
            ValueError: If direction is not one of UP, DOWN, LEFT, RIGHT
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{direction}'.")

        with self._lock:
            if self.game_state != RUNNING:
                return False
            accepted = self.directions.request(direction)

        if not accepted:
            logger.debug(f"Ignored reversal {direction} while heading {self.directions.committed}")
        return accepted

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self) -> GameSnapshot:
        """
        Execute one tick:
          1) Commit the pending direction
          2) Compute the new head
          3) Wall, self and obstacle checks (any hit ends the game, snake unchanged)
          4) Move the snake, growing and re-placing food if it ate
        Does nothing unless the game is running.
        """
        with self._lock:
            if self.game_state != RUNNING:
                return self._snapshot

            direction = self.directions.commit()
            new_head = move_cell(self.snake.head, direction)
            self.tick += 1

            if not in_bounds(new_head, self.config.grid_size):
                self._end_game(DEATH_WALL)
            # Tail counts as occupied even though it would move this tick
            elif self.snake.occupies(new_head):
                self._end_game(DEATH_SELF)
            elif new_head in self.obstacles:
                self._end_game(DEATH_OBSTACLE)
            else:
                ate = self.food is not None and new_head == self.food
                self.snake.advance(new_head, grow=ate)
                if ate:
                    self._eat()

            snapshot = self._refresh_snapshot()
            self._notify(snapshot)

        return snapshot

    def _eat(self):
        self.score += 1
        self.speed = max(self.config.min_speed, self.speed - self.config.speed_increment)

        grid_size = self.config.grid_size
        if len(self.snake) + len(self.obstacles) >= grid_size * grid_size:
            # Nowhere left to put food
            self.food = None
            logger.info(f"Board full in game {self.game_id} at score {self.score}")
        else:
            self.food = place_food(self.snake.positions, self.obstacles, grid_size, self.rng)

        logger.debug(f"Ate food: score={self.score}, speed={self.speed}, next food at {self.food}")

    # ------------------------------------------------------------------
    # Board setup (scenarios, tests, replays)
    # ------------------------------------------------------------------

    def set_snake(self, positions: Iterable[Cell], direction: Optional[str] = None):
        """
        Replace the snake body (head first) and optionally its heading.

        Food lying under the new body is moved to a free cell, or removed if
        the body and obstacles cover the board. Nothing changes if any check
        fails.
        """
        positions = [tuple(p) for p in positions]
        with self._lock:
            self._check_cells(positions, "Snake")
            if len(set(positions)) != len(positions):
                raise ValueError("Snake cells must be distinct.")
            if any(p in self.obstacles for p in positions):
                raise ValueError("Snake cannot overlap an obstacle.")

            snake = Snake(positions)
            directions = DirectionBuffer(direction) if direction is not None else self.directions

            grid_size = self.config.grid_size
            food = self.food
            if food is not None and snake.occupies(food):
                if len(snake) + len(self.obstacles) >= grid_size * grid_size:
                    food = None
                else:
                    food = place_food(snake.positions, self.obstacles, grid_size, self.rng)

            self.snake = snake
            self.directions = directions
            self.food = food
            snapshot = self._refresh_snapshot()
            self._notify(snapshot)

    def set_food(self, cell: Cell):
        """Put the food at a specific cell."""
        cell = tuple(cell)
        with self._lock:
            self._check_cells([cell], "Food")
            if self.snake is not None and self.snake.occupies(cell):
                raise ValueError(f"Food at {cell} overlaps the snake.")
            if cell in self.obstacles:
                raise ValueError(f"Food at {cell} overlaps an obstacle.")
            self.food = cell
            snapshot = self._refresh_snapshot()
            self._notify(snapshot)

    def set_obstacles(self, cells: Iterable[Cell]):
        """Replace the obstacle set."""
        cells = [tuple(c) for c in cells]
        with self._lock:
            self._check_cells(cells, "Obstacle")
            if self.snake is not None and any(self.snake.occupies(c) for c in cells):
                raise ValueError("Obstacles cannot overlap the snake.")
            if self.food is not None and self.food in cells:
                raise ValueError(f"Obstacle at {self.food} overlaps the food.")
            self.obstacles = frozenset(cells)
            snapshot = self._refresh_snapshot()
            self._notify(snapshot)

    def _check_cells(self, cells: List[Cell], label: str):
        if not cells and label == "Snake":
            raise ValueError("A snake needs at least one cell.")
        for cell in cells:
            if not in_bounds(cell, self.config.grid_size):
                raise ValueError(f"{label} out of bounds at {cell}.")

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def get_snapshot(self) -> GameSnapshot:
        """Return the latest published snapshot."""
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a callback invoked with every new snapshot.

        Listeners run while the engine lock is held, so they must return
        quickly and must not wait on other threads that use the engine.

        Returns:
            A function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _build_snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            tick=self.tick,
            game_id=self.game_id,
            snake=tuple(self.snake.positions) if self.snake is not None else (),
            food=self.food,
            obstacles=self.obstacles,
            score=self.score,
            speed=self.speed,
            grid_size=self.config.grid_size,
            direction=self.directions.committed,
            game_state=self.game_state,
            death_reason=self.death_reason,
        )

    def _refresh_snapshot(self) -> GameSnapshot:
        self._snapshot = self._build_snapshot()
        return self._snapshot

    def _notify(self, snapshot: GameSnapshot):
        # Called with the lock held so listeners see snapshots in publication order
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener {listener!r} failed: {e}")

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self._snapshot.print_board() + "\n")


# -------------------------------
# Simulation Function
# -------------------------------

def run_simulation(
    player: Player,
    config: Optional[GameConfig] = None,
    max_ticks: int = 1000,
    rng: Optional[random.Random] = None,
    show_board: bool = False
) -> Dict[str, Any]:
    """
    Runs a single headless game driven by a player.

    Args:
        player: Supplies a direction for every tick.
        config: Game settings (defaults to GameConfig()).
        max_ticks: Hard cap on ticks in case the player never dies.
        rng: Optional random source for placement.
        show_board: Print the board after every tick.

    Returns:
        A dictionary summarizing the game (game_id, score, ticks, death_reason, ...).
    """
    game = SnakeGame(config=config, rng=rng)
    game.start()

    def feed_player(snapshot: GameSnapshot):
        game.request_direction(player.get_move(snapshot))
        if show_board:
            game.print_board()

    run_ticks(game, max_ticks, before_tick=feed_player)

    final = game.get_snapshot()
    return {
        "game_id": game.game_id,
        "player": player.name,
        "score": final.score,
        "ticks": final.tick,
        "game_state": final.game_state,
        "death_reason": final.death_reason,
        "snake_length": len(final.snake),
        "final_speed": final.speed,
    }


# -------------------------------
# Example Usage (Main Entry Point)
# -------------------------------
def main(argv: Optional[List[str]] = None):
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(
        description="Run one headless grid snake game with a scripted player."
    )
    parser.add_argument("--player", type=str, default="greedy", choices=AVAILABLE_PLAYERS,
                        help="Which scripted player drives the snake")
    parser.add_argument("--grid-size", type=int, default=None,
                        help="Board side length (overrides SNAKE_GRID_SIZE)")
    parser.add_argument("--obstacles", type=int, default=None,
                        help="Number of obstacles (overrides SNAKE_OBSTACLE_COUNT)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducible games")
    parser.add_argument("--max-ticks", type=int, default=1000,
                        help="Maximum number of ticks")
    parser.add_argument("--show-board", action="store_true",
                        help="Print the board after every tick")
    parser.add_argument("--list-players", action="store_true",
                        help="List the available players and exit")

    args = parser.parse_args(argv)

    if args.list_players:
        for entry in list_players():
            print(f"{entry['key']:<8} {entry['description']}")
        return None

    config = load_config(grid_size=args.grid_size, obstacle_count=args.obstacles, seed=args.seed)
    player = get_player_class(args.player)(rng=random.Random(args.seed))

    result = run_simulation(player, config, max_ticks=args.max_ticks, show_board=args.show_board)

    print("\nSimulation Result Summary:")
    print(json.dumps(result, indent=2))
    return result


if __name__ == "__main__":
    main()
