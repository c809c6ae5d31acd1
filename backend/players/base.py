"""
Base input-source interface for the game loops.
"""

from typing import Optional

from domain.game_state import GameState


class Player:
    """
    Base class/interface for whatever steers a snake.

    The loops ask the player for a direction once per tick. Returning None
    means "no input this tick": the snake keeps its current heading.
    """

    def get_move(self, game_state: GameState) -> Optional[str]:
        """
        Return a requested direction given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of "up", "down", "left", "right", or None
        """
        raise NotImplementedError
