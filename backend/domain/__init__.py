"""
Domain entities for the snake game engine.

This module contains the core game entities and the simulation engine,
independent of infrastructure concerns (HTTP calls, timers, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITE_DIRECTIONS,
    WRAP, WALLED, VALID_MODES, GRID_SIZE, FOOD_REWARD,
)
from .game_state import GameState, Position
from .food import place_food, BoardSaturatedError
from .engine import tick, create_initial_state, is_opposite
from .records import User, LeaderboardEntry, ActivePlayer

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITE_DIRECTIONS',
    'WRAP', 'WALLED', 'VALID_MODES', 'GRID_SIZE', 'FOOD_REWARD',
    'GameState', 'Position',
    'place_food', 'BoardSaturatedError',
    'tick', 'create_initial_state', 'is_opposite',
    'User', 'LeaderboardEntry', 'ActivePlayer',
]
