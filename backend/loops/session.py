"""
Session loop: one player's interactive game driven by a tick timer.

State machine: not_started -> running <-> paused -> game_over -> (start) running
"""

import logging
import random
from typing import Callable, Optional

import requests
import schedule

import config
from domain.constants import VALID_MODES, WRAP
from domain.engine import create_initial_state, tick
from domain.food import BoardSaturatedError
from domain.game_state import GameState
from domain.records import LeaderboardEntry
from players.base import Player
from players.keyboard_player import KeyboardPlayer
from services.api_client import ApiError, SnakeApiClient
from .timers import TickTimer

logger = logging.getLogger(__name__)

NOT_STARTED = "not_started"
RUNNING = "running"
PAUSED = "paused"
GAME_OVER = "game_over"


class SessionLoop:
    """
    Owns the current GameState of one player and replaces it every tick.

    Args:
        scheduler: scheduler that delivers the tick timer
        client: authenticated context used to report the final score (optional)
        mode: boundary mode for the session
        tick_ms: tick cadence in milliseconds
        player: input source; defaults to a KeyboardPlayer fed by handle_key()
        rng: random source for food placement
        on_update: called with every new GameState
    """

    def __init__(
        self,
        scheduler: schedule.Scheduler,
        client: Optional[SnakeApiClient] = None,
        mode: str = WRAP,
        tick_ms: Optional[int] = None,
        player: Optional[Player] = None,
        rng: Optional[random.Random] = None,
        on_update: Optional[Callable[[GameState], None]] = None
    ):
        if mode not in VALID_MODES:
            raise ValueError(f"Invalid boundary mode: {mode!r}")
        self.client = client
        self.mode = mode
        self.player = player or KeyboardPlayer()
        self.rng = rng
        self.on_update = on_update
        self.status = NOT_STARTED
        self.state = create_initial_state(rng)
        self.last_report: Optional[LeaderboardEntry] = None
        self._score_reported = False

        tick_ms = tick_ms if tick_ms is not None else config.SESSION_TICK_MS
        self.timer = TickTimer(scheduler, tick_ms / 1000.0, self.on_tick, name="session")

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def set_mode(self, mode: str) -> None:
        """Choose the boundary mode. Only allowed while no session is in play."""
        if mode not in VALID_MODES:
            raise ValueError(f"Invalid boundary mode: {mode!r}")
        if self.status in (RUNNING, PAUSED):
            raise ValueError("Cannot change the boundary mode during a session.")
        self.mode = mode

    def start(self) -> None:
        """Start (or restart) a session from a fresh state."""
        self.timer.cancel()
        self.state = create_initial_state(self.rng)
        if isinstance(self.player, KeyboardPlayer):
            self.player.clear()
        self._score_reported = False
        self.last_report = None
        self.status = RUNNING
        self.timer.start()
        logger.info(f"Session started (mode={self.mode})")
        self._notify()

    def pause(self) -> None:
        if self.status != RUNNING:
            return
        self.status = PAUSED
        self.timer.cancel()

    def resume(self) -> None:
        if self.status != PAUSED:
            return
        self.status = RUNNING
        self.timer.start()

    def toggle_pause(self) -> None:
        if self.status == RUNNING:
            self.pause()
        elif self.status == PAUSED:
            self.resume()

    def stop(self) -> None:
        """Tear the session down; an unfinished game is abandoned, not reported."""
        self.timer.cancel()
        if self.status in (RUNNING, PAUSED):
            self.status = NOT_STARTED

    def handle_key(self, key: str) -> Optional[str]:
        """
        Buffer a key press for the next tick. Keys are ignored unless the
        session is running. Returns the buffered direction, if any.
        """
        if self.status != RUNNING or not isinstance(self.player, KeyboardPlayer):
            return None
        return self.player.press(key)

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def on_tick(self) -> None:
        if self.status != RUNNING:
            return

        direction = self.player.get_move(self.state)
        try:
            new_state = tick(self.state, direction, self.mode, self.rng)
        except BoardSaturatedError as e:
            logger.error(f"Ending session, board is full: {e}")
            new_state = self.state.with_game_over()

        self.state = new_state
        self._notify()

        if new_state.game_over:
            self._finish()

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self.state)

    def _finish(self) -> None:
        self.status = GAME_OVER
        self.timer.cancel()
        logger.info(f"Game over. Final score: {self.state.score} (mode={self.mode})")
        self._report_score()

    def _report_score(self) -> None:
        """
        Send the final score to the leaderboard once per session. Failures are
        logged; the terminal state is kept as is.
        """
        if self._score_reported or self.state.score <= 0:
            return
        if self.client is None or not self.client.is_authenticated:
            logger.info("Not logged in, skipping score report")
            return

        self._score_reported = True
        try:
            self.last_report = self.client.report_score(self.state.score, self.mode)
            logger.info(f"Reported score {self.state.score} to the leaderboard")
        except (ApiError, requests.RequestException) as e:
            logger.error(f"Failed to report score {self.state.score}: {e}")
