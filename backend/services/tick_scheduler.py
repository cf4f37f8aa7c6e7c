"""
Tick sources for the snake engine.

TickScheduler drives a SnakeGame in real time from a background thread using
a private `schedule` scheduler whose period follows the game's current speed.
run_ticks() is the synthetic counterpart: it steps a game synchronously,
which is what headless runs and tests use.
"""

import logging
import threading
from typing import Callable, List, Optional

import schedule

from domain.constants import RUNNING
from domain.game_snapshot import GameSnapshot

logger = logging.getLogger(__name__)

# Upper bound on how long the loop sleeps before re-checking for stop()
MAX_IDLE_SECONDS = 0.05


class TickScheduler:
    """
    Periodically calls ``game.step()`` while the game is running.

    The tick interval is re-read from the snapshot after every step, so a
    speed-up takes effect from the next tick. The scheduler stops itself once
    the game leaves RUNNING; a step in progress always runs to completion.
    """

    def __init__(self, game, on_tick: Optional[Callable[[GameSnapshot], None]] = None):
        self.game = game
        self.on_tick = on_tick
        self._scheduler = schedule.Scheduler()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._interval_ms: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    @property
    def interval_ms(self) -> Optional[int]:
        return self._interval_ms

    def start(self):
        """Start ticking at the game's current speed. No-op if already running."""
        if self.is_running:
            return
        if self._thread is not None:
            # Previous loop is winding down after a game over
            self.stop()

        self._stop_event.clear()
        self._scheduler.clear()
        self._schedule_next(self.game.get_snapshot().speed)

        self._thread = threading.Thread(target=self._run, name="snake-ticks", daemon=True)
        self._thread.start()
        logger.info(f"Tick scheduler started at {self._interval_ms}ms")

    def stop(self):
        """Stop ticking and wait for the loop thread to exit."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._scheduler.clear()
        self._thread = None

    def _schedule_next(self, interval_ms: int):
        self._interval_ms = interval_ms
        self._scheduler.every(interval_ms / 1000.0).seconds.do(self._tick)

    def _tick(self):
        snapshot = self.game.step()

        if self.on_tick is not None:
            try:
                self.on_tick(snapshot)
            except Exception as e:
                logger.warning(f"on_tick handler failed: {e}")

        if snapshot.game_state != RUNNING:
            logger.info(f"Game left {RUNNING} ({snapshot.game_state}); stopping ticks")
            self._stop_event.set()
            return schedule.CancelJob

        if snapshot.speed != self._interval_ms:
            logger.debug(f"Tick interval {self._interval_ms}ms -> {snapshot.speed}ms")
            self._schedule_next(snapshot.speed)
            return schedule.CancelJob

        return None

    def _run(self):
        while not self._stop_event.is_set():
            self._scheduler.run_pending()
            idle = self._scheduler.idle_seconds
            if idle is None:
                break
            self._stop_event.wait(max(0.0, min(idle, MAX_IDLE_SECONDS)))


def run_ticks(
    game,
    count: int,
    before_tick: Optional[Callable[[GameSnapshot], None]] = None
) -> List[GameSnapshot]:
    """
    Step ``game`` up to ``count`` times, stopping early once it is over.

    Args:
        game: A SnakeGame
        count: Maximum number of ticks
        before_tick: Called with the current snapshot before each step
            (a good place to feed input)

    Returns:
        The snapshot produced by every executed step
    """
    snapshots: List[GameSnapshot] = []
    for _ in range(count):
        current = game.get_snapshot()
        if current.game_state != RUNNING:
            break
        if before_tick is not None:
            before_tick(current)
        snapshots.append(game.step())
    return snapshots
