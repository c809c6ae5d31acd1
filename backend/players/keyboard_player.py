"""
Keyboard input: key bindings plus a single-slot direction buffer.
"""

from typing import Optional

from domain.constants import UP, DOWN, LEFT, RIGHT
from domain.game_state import GameState
from .base import Player

KEY_BINDINGS = {
    'ArrowUp': UP,
    'ArrowDown': DOWN,
    'ArrowLeft': LEFT,
    'ArrowRight': RIGHT,
    'w': UP,
    's': DOWN,
    'a': LEFT,
    'd': RIGHT,
}


def get_next_direction(key: str) -> Optional[str]:
    """Map a key name to a direction, or None for unbound keys."""
    return KEY_BINDINGS.get(key)


class KeyboardPlayer(Player):
    """
    Buffers the most recent mapped key press.

    Presses arrive between ticks; only the latest one is kept and it is
    consumed by the next get_move() call. Nothing is queued across ticks.
    """

    def __init__(self):
        self.buffered_direction: Optional[str] = None

    def press(self, key: str) -> Optional[str]:
        """
        Record a key press. Returns the mapped direction, or None if the key
        is not bound (the buffer is left untouched in that case).
        """
        direction = get_next_direction(key)
        if direction is not None:
            self.buffered_direction = direction
        return direction

    def clear(self) -> None:
        self.buffered_direction = None

    def get_move(self, game_state: GameState) -> Optional[str]:
        direction = self.buffered_direction
        self.buffered_direction = None
        return direction
