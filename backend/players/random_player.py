"""
Random player implementation - simulates a remote player's occasional turns.
"""

import random
from typing import Optional

from domain.constants import UP, DOWN, LEFT, RIGHT
from domain.game_state import GameState
from .base import Player

DIRECTIONS = [UP, DOWN, LEFT, RIGHT]


class RandomPlayer(Player):
    """
    Requests a uniformly random direction with a fixed probability per tick
    and otherwise lets the snake keep going.
    """

    def __init__(self, turn_probability: float = 0.1, rng: Optional[random.Random] = None):
        if not 0.0 <= turn_probability <= 1.0:
            raise ValueError(f"turn_probability must be within [0, 1], got {turn_probability}")
        self.turn_probability = turn_probability
        self.rng = rng or random.Random()

    def get_move(self, game_state: GameState) -> Optional[str]:
        if self.rng.random() < self.turn_probability:
            return self.rng.choice(DIRECTIONS)
        return None
