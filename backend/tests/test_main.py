"""
Tests for main.py - Snake game engine.

These tests pin down the per-tick transition and the lifecycle so the
engine can be refactored without changing what the view layer sees.
"""

import pytest
import sys
import os
import dataclasses
import random
import threading
from unittest.mock import Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from main import SnakeGame, run_simulation, main
from domain.constants import (
    UP, DOWN, LEFT, RIGHT,
    IDLE, RUNNING, GAME_OVER,
)
from players import RandomPlayer, GreedyPlayer


def make_game(grid_size=10, obstacle_count=0, **kwargs) -> SnakeGame:
    config = GameConfig(grid_size=grid_size, obstacle_count=obstacle_count, **kwargs)
    return SnakeGame(config, rng=random.Random(1234))


def assert_placement_invariants(snapshot):
    assert len(set(snapshot.snake)) == len(snapshot.snake)
    if snapshot.food is not None:
        assert snapshot.food not in snapshot.snake
        assert snapshot.food not in snapshot.obstacles
    assert not set(snapshot.snake) & set(snapshot.obstacles)


class TestLifecycle:
    """Tests for IDLE -> RUNNING -> GAME_OVER transitions."""

    def test_new_game_is_idle(self):
        """A fresh engine is IDLE with no snake and no food."""
        game = make_game()
        snapshot = game.get_snapshot()
        assert snapshot.game_state == IDLE
        assert snapshot.snake == ()
        assert snapshot.food is None
        assert snapshot.score == 0

    def test_start_initializes_session(self):
        """start() yields RUNNING with a single centered cell and fresh placements."""
        game = make_game(grid_size=10, obstacle_count=8, initial_speed=150)
        snapshot = game.start()

        assert snapshot.game_state == RUNNING
        assert snapshot.snake == ((5, 5),)
        assert snapshot.score == 0
        assert snapshot.speed == 150
        assert snapshot.direction == RIGHT
        assert snapshot.tick == 0
        assert len(snapshot.obstacles) == 8
        assert snapshot.food is not None
        assert_placement_invariants(snapshot)

    def test_restart_after_game_over_discards_session(self):
        """restart() from GAME_OVER resets everything."""
        game = make_game()
        game.start()
        game.set_food((6, 5))
        game.step()
        first_id = game.game_id
        game.set_snake([(9, 5), (8, 5)], direction=RIGHT)
        assert game.step().game_state == GAME_OVER

        snapshot = game.restart()
        assert snapshot.game_state == RUNNING
        assert snapshot.snake == ((5, 5),)
        assert snapshot.score == 0
        assert snapshot.speed == game.config.initial_speed
        assert snapshot.death_reason is None
        assert game.game_id != first_id

    def test_invalid_config_rejected_at_construction(self):
        """The engine validates its config eagerly."""
        with pytest.raises(ValueError):
            SnakeGame(GameConfig(grid_size=2, obstacle_count=3))

    def test_step_is_noop_when_not_running(self):
        """step() does nothing while IDLE or after GAME_OVER."""
        game = make_game()
        idle = game.step()
        assert idle.game_state == IDLE
        assert idle.tick == 0

        game.start()
        game.set_snake([(0, 5)], direction=LEFT)
        over = game.step()
        assert over.game_state == GAME_OVER
        again = game.step()
        assert again is over


class TestStep:
    """Tests for the per-tick transition."""

    def test_eating_food_grows_and_scores(self):
        """Head (5,5) moving right onto food at (6,5) grows the snake."""
        game = make_game(grid_size=10)
        game.start()
        game.set_snake([(5, 5)], direction=RIGHT)
        game.set_food((6, 5))

        snapshot = game.step()

        assert snapshot.snake == ((6, 5), (5, 5))
        assert snapshot.score == 1
        assert snapshot.food not in {(6, 5), (5, 5)}
        assert snapshot.food not in snapshot.obstacles
        assert snapshot.game_state == RUNNING

    def test_wall_collision_ends_game_with_snake_unchanged(self):
        """Head (0,5) moving left leaves the grid: GAME_OVER, body untouched."""
        game = make_game(grid_size=10)
        game.start()
        game.set_food((9, 9))
        game.set_snake([(0, 5)], direction=LEFT)

        snapshot = game.step()

        assert snapshot.game_state == GAME_OVER
        assert snapshot.death_reason == "wall"
        assert snapshot.snake == ((0, 5),)

    def test_plain_move_drops_tail(self):
        """Body [(5,5),(5,6),(5,7)] moving up drops (5,7)."""
        game = make_game(grid_size=10)
        game.start()
        game.set_food((0, 0))
        game.set_snake([(5, 5), (5, 6), (5, 7)], direction=UP)

        snapshot = game.step()

        assert snapshot.snake == ((5, 4), (5, 5), (5, 6))
        assert snapshot.score == 0

    def test_moving_into_vacating_tail_is_collision(self):
        """The tail still counts as occupied on the tick it would move."""
        game = make_game(grid_size=10)
        game.start()
        game.set_food((0, 0))
        # Square loop: head (5,5), tail (5,6) directly below the head
        game.set_snake([(5, 5), (6, 5), (6, 6), (5, 6)], direction=LEFT)
        assert game.request_direction(DOWN) is True

        snapshot = game.step()

        assert snapshot.game_state == GAME_OVER
        assert snapshot.death_reason == "self"
        assert snapshot.snake == ((5, 5), (6, 5), (6, 6), (5, 6))

    def test_obstacle_collision(self):
        """Running into an obstacle ends the game."""
        game = make_game(grid_size=10)
        game.start()
        game.set_food((0, 0))
        game.set_snake([(5, 5)], direction=RIGHT)
        game.set_obstacles([(6, 5)])

        snapshot = game.step()

        assert snapshot.game_state == GAME_OVER
        assert snapshot.death_reason == "obstacle"
        assert snapshot.snake == ((5, 5),)

    def test_speed_decreases_and_floors(self):
        """Each food removes speed_increment ms, never going below min_speed."""
        game = make_game(grid_size=10, initial_speed=70, min_speed=50, speed_increment=15)
        game.start()
        game.set_snake([(1, 5)], direction=RIGHT)

        speeds = []
        for x in range(2, 6):
            game.set_food((x, 5))
            speeds.append(game.step().speed)

        assert speeds == [55, 50, 50, 50]
        assert game.get_snapshot().score == 4

    def test_score_and_speed_monotonic_over_random_play(self):
        """Across a whole session score never drops and speed never rises."""
        game = make_game(grid_size=8, obstacle_count=4)
        game.start()
        player = GreedyPlayer(rng=random.Random(7))

        last = game.get_snapshot()
        for _ in range(300):
            if last.game_state != RUNNING:
                break
            game.request_direction(player.get_move(last))
            snapshot = game.step()
            assert snapshot.score in (last.score, last.score + 1)
            assert snapshot.speed <= last.speed
            assert snapshot.speed >= game.config.min_speed
            assert_placement_invariants(snapshot)
            last = snapshot

    def test_board_full_leaves_no_food(self):
        """Filling the last free cell leaves the board without food."""
        game = make_game(grid_size=2)
        game.start()
        game.set_snake([(0, 1), (0, 0), (1, 0)], direction=RIGHT)
        # The only free cell left
        assert game.get_snapshot().food == (1, 1)

        snapshot = game.step()
        assert snapshot.score == 1
        assert len(snapshot.snake) == 4
        assert snapshot.food is None

        assert game.step().death_reason == "wall"


class TestDirectionInput:
    """Tests for request_direction()."""

    def test_rejected_when_not_running(self):
        """Input before start() is ignored."""
        game = make_game()
        assert game.request_direction(UP) is False

    def test_reversal_is_ignored(self):
        """Reversing the committed direction is a no-op."""
        game = make_game()
        game.start()
        assert game.request_direction(LEFT) is False
        game.set_food((0, 0))
        assert game.step().snake[0] == (6, 5)

    def test_reversal_checked_against_committed_not_pending(self):
        """UP then LEFT while heading RIGHT: LEFT still reverses the committed heading."""
        game = make_game()
        game.start()
        assert game.request_direction(UP) is True
        assert game.request_direction(LEFT) is False
        game.set_food((0, 0))
        snapshot = game.step()
        assert snapshot.direction == UP
        assert snapshot.snake[0] == (5, 4)

    def test_last_write_wins(self):
        """Only the latest accepted request survives to the next tick."""
        game = make_game()
        game.start()
        game.request_direction(UP)
        game.request_direction(DOWN)
        game.set_food((0, 0))
        assert game.step().snake[0] == (5, 6)

    def test_unknown_direction_raises(self):
        """Strings outside UP/DOWN/LEFT/RIGHT are a programming error."""
        game = make_game()
        game.start()
        with pytest.raises(ValueError):
            game.request_direction("NORTH")


class TestSnapshots:
    """Tests for snapshot publication."""

    def test_snapshots_are_immutable(self):
        """Snapshots are frozen and unaffected by later steps."""
        game = make_game()
        first = game.start()
        game.set_food((0, 0))
        game.step()

        assert first.snake == ((5, 5),)
        with pytest.raises(dataclasses.FrozenInstanceError):
            first.score = 10

    def test_subscribers_receive_every_snapshot(self):
        """Listeners see start and every step; unsubscribe stops delivery."""
        game = make_game()
        received = []
        unsubscribe = game.subscribe(received.append)

        game.start()
        game.set_food((0, 0))
        game.step()
        unsubscribe()
        game.step()

        states = [s.game_state for s in received]
        assert states[0] == RUNNING
        assert received[-1].tick == 1

    def test_failing_listener_does_not_break_engine(self):
        """A listener that raises is logged and skipped."""
        game = make_game()
        broken = Mock(side_effect=RuntimeError("boom"))
        good = Mock()
        game.subscribe(broken)
        game.subscribe(good)

        snapshot = game.start()

        assert snapshot.game_state == RUNNING
        good.assert_called_once_with(snapshot)


    def test_listeners_see_snapshots_in_order_across_threads(self):
        """Steps racing restarts are still delivered session by session, tick by tick."""
        game = make_game(grid_size=20)
        received = []
        game.subscribe(lambda s: received.append((s.game_id, s.tick)))
        game.start()

        def keep_stepping():
            for _ in range(400):
                game.step()

        def keep_restarting():
            for _ in range(20):
                game.restart()

        threads = [threading.Thread(target=keep_stepping), threading.Thread(target=keep_restarting)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        finished = set()
        current_id, last_tick = received[0]
        for game_id, tick in received[1:]:
            if game_id == current_id:
                assert tick >= last_tick
            else:
                assert game_id not in finished
                finished.add(current_id)
                current_id = game_id
            last_tick = tick
        assert len(finished) == 20


class TestBoardSetup:
    """Tests for the set_* helpers."""

    def test_set_food_out_of_bounds(self):
        game = make_game()
        game.start()
        with pytest.raises(ValueError):
            game.set_food((10, 0))

    def test_set_food_on_snake(self):
        game = make_game()
        game.start()
        with pytest.raises(ValueError):
            game.set_food((5, 5))

    def test_set_snake_rejects_duplicates(self):
        game = make_game()
        game.start()
        with pytest.raises(ValueError):
            game.set_snake([(1, 1), (1, 1)])

    def test_set_obstacles_on_snake(self):
        game = make_game()
        game.start()
        with pytest.raises(ValueError):
            game.set_obstacles([(5, 5)])

    def test_rejected_set_snake_leaves_state_untouched(self):
        """A set_snake that raises changes neither the engine nor its snapshot."""
        game = make_game()
        game.start()
        game.set_food((9, 9))
        game.set_obstacles([(0, 0)])
        before = game.get_snapshot()

        with pytest.raises(ValueError):
            game.set_snake([(1, 1), (1, 2)], direction="NORTH")
        with pytest.raises(ValueError):
            game.set_snake([(1, 0), (0, 0)])

        assert game.get_snapshot() is before
        assert tuple(game.snake.positions) == before.snake
        assert game.food == before.food
        assert game.directions.committed == before.direction

    def test_set_snake_covering_board_removes_food(self):
        """A body that fills the grid leaves no food, and engine and snapshot agree."""
        game = make_game(grid_size=2)
        game.start()

        game.set_snake([(0, 0), (1, 0), (1, 1), (0, 1)], direction=DOWN)

        snapshot = game.get_snapshot()
        assert game.food is None
        assert snapshot.food is None
        assert snapshot.snake == ((0, 0), (1, 0), (1, 1), (0, 1))
        assert tuple(game.snake.positions) == snapshot.snake


class TestRunSimulation:
    """Tests for run_simulation() and the CLI entry point."""

    def test_run_simulation_returns_summary(self):
        """A headless game reports its outcome."""
        config = GameConfig(grid_size=10, obstacle_count=3, seed=42)
        result = run_simulation(RandomPlayer(rng=random.Random(42)), config, max_ticks=200)

        assert result["player"] == "RandomPlayer"
        assert 0 < result["ticks"] <= 200
        assert result["snake_length"] == result["score"] + 1
        if result["game_state"] == GAME_OVER:
            assert result["death_reason"] in {"wall", "self", "obstacle"}
        else:
            assert result["ticks"] == 200

    def test_main_cli(self, capsys):
        """main() parses flags and prints a JSON summary."""
        result = main(["--player", "greedy", "--grid-size", "8", "--obstacles", "2",
                       "--seed", "3", "--max-ticks", "50"])

        out = capsys.readouterr().out
        assert "Simulation Result Summary" in out
        assert result["player"] == "GreedyPlayer"
        assert result["ticks"] <= 50

    def test_main_cli_lists_players(self, capsys):
        """--list-players prints the registry and skips the game."""
        assert main(["--list-players"]) is None

        out = capsys.readouterr().out
        assert "random" in out
        assert "greedy" in out
