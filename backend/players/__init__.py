"""
Input sources for the game loops.

A player decides which direction (if any) to request on each tick: real
keyboard input for the session loop, synthetic input for the spectator demo.
"""

from .base import Player
from .keyboard_player import KeyboardPlayer, KEY_BINDINGS, get_next_direction
from .random_player import RandomPlayer

__all__ = [
    'Player',
    'KeyboardPlayer',
    'KEY_BINDINGS',
    'get_next_direction',
    'RandomPlayer',
]
