"""
Tests for services/tick_scheduler.py - real-time and synthetic tick sources.
"""

import sys
import os
import random
import time

import schedule

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from main import SnakeGame
from domain.constants import RUNNING, GAME_OVER, UP
from services.tick_scheduler import TickScheduler, run_ticks


def make_game(**kwargs) -> SnakeGame:
    values = dict(grid_size=5, obstacle_count=0, initial_speed=10, min_speed=5, speed_increment=1)
    values.update(kwargs)
    return SnakeGame(GameConfig(**values), rng=random.Random(0))


def wait_until_stopped(ticker: TickScheduler, timeout: float = 5.0):
    deadline = time.time() + timeout
    while ticker.is_running and time.time() < deadline:
        time.sleep(0.01)


class TestTickScheduler:
    """Tests for the background TickScheduler."""

    def test_runs_until_game_over(self):
        """Ticks keep coming until the snake hits the wall, then the scheduler stops."""
        game = make_game()
        game.start()
        game.set_food((0, 0))
        seen = []
        ticker = TickScheduler(game, on_tick=seen.append)

        ticker.start()
        wait_until_stopped(ticker)
        ticker.stop()

        final = game.get_snapshot()
        assert final.game_state == GAME_OVER
        assert final.death_reason == "wall"
        # (2,2) heading right: (3,2), (4,2), then off the board
        assert final.tick == 3
        assert [s.tick for s in seen] == [1, 2, 3]
        assert not ticker.is_running

    def test_stop_before_first_tick(self):
        """stop() cancels pending ticks; nothing runs afterwards."""
        game = make_game(initial_speed=1000, min_speed=500)
        game.start()
        ticker = TickScheduler(game)

        ticker.start()
        assert ticker.is_running
        ticker.stop()

        assert not ticker.is_running
        assert game.get_snapshot().tick == 0

    def test_interval_follows_speed(self):
        """Eating food reschedules the job at the new, faster interval."""
        game = make_game(initial_speed=100, min_speed=50, speed_increment=10)
        game.start()
        game.set_food((3, 2))
        ticker = TickScheduler(game)
        ticker._schedule_next(game.get_snapshot().speed)

        result = ticker._tick()

        assert result is schedule.CancelJob
        assert ticker.interval_ms == 90
        assert game.get_snapshot().score == 1

    def test_failing_on_tick_handler_is_logged(self):
        """A broken on_tick handler does not stop the step from happening."""
        game = make_game(initial_speed=100, min_speed=50)
        game.start()
        game.set_food((0, 0))

        def broken(snapshot):
            raise RuntimeError("render failed")

        ticker = TickScheduler(game, on_tick=broken)
        ticker._schedule_next(100)

        assert ticker._tick() is None
        assert game.get_snapshot().tick == 1


class TestRunTicks:
    """Tests for the synthetic run_ticks() driver."""

    def test_stops_early_on_game_over(self):
        game = make_game()
        game.start()
        game.set_food((0, 0))

        snapshots = run_ticks(game, 100)

        assert len(snapshots) == 3
        assert snapshots[-1].game_state == GAME_OVER

    def test_before_tick_feeds_input(self):
        game = make_game()
        game.start()
        game.set_food((0, 0))

        snapshots = run_ticks(game, 1, before_tick=lambda s: game.request_direction(UP))

        assert snapshots[0].snake[0] == (2, 1)
        assert snapshots[0].game_state == RUNNING

    def test_idle_game_never_ticks(self):
        assert run_ticks(make_game(), 10) == []
