"""
State feeds for the watch view.

A feed produces the next state to show for a remote player. The only feed
today is a local simulation with synthetic input; a feed that replays real
remote state can be dropped in without touching the engine or the loop.
"""

import logging
import random
from typing import Optional

import config
from domain.engine import create_initial_state, tick
from domain.food import BoardSaturatedError
from domain.game_state import GameState
from domain.records import ActivePlayer
from players.base import Player
from players.random_player import RandomPlayer

logger = logging.getLogger(__name__)


class StateFeed:
    """Interface: return the next state to display for a player."""

    def next_state(self, player: ActivePlayer) -> GameState:
        raise NotImplementedError


class SimulatedStateFeed(StateFeed):
    """
    Approximates a remote player by running the engine locally.

    Each call advances the player's state one tick, steered by the input
    source (by default a RandomPlayer that turns with a small probability).
    A game that ends is replaced straight away by a fresh one so the view
    keeps looping.
    """

    def __init__(self, input_source: Optional[Player] = None, rng: Optional[random.Random] = None):
        self.rng = rng
        self.input_source = input_source or RandomPlayer(
            turn_probability=config.SPECTATOR_TURN_PROBABILITY,
            rng=rng,
        )

    def next_state(self, player: ActivePlayer) -> GameState:
        state = player.game_state
        direction = self.input_source.get_move(state)
        try:
            new_state = tick(state, direction, player.mode, self.rng)
        except BoardSaturatedError:
            new_state = state.with_game_over()

        if new_state.game_over:
            logger.debug(f"Simulated game for {player.username} ended at {new_state.score}, restarting")
            return create_initial_state(self.rng)
        return new_state
